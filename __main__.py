import sys

from linemarks_cli.main import main


if __name__ == "__main__":
    sys.exit(main())
