import sys

from linemarks_cli.main import main

sys.exit(main())
