import argparse
import logging
import sys

from linemarks_cli.commands import (
    open_session,
    run_activate,
    run_clear,
    run_create_group,
    run_delete_group,
    run_edit,
    run_groups,
    run_list,
    run_move,
    run_next,
    run_prev,
    run_remove,
    run_rename_group,
    run_set_color,
    run_toggle,
)


def _line(value: str) -> int:
    line = int(value)
    if line < 1:
        raise argparse.ArgumentTypeError("line numbers start at 1")
    return line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linemarks",
        description="Line bookmarks with groups and colors",
    )
    parser.add_argument("--db", default="linemarks.db", help="State database path")
    parser.add_argument("--config", default=None, help="Settings file (linemarks.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    toggle = sub.add_parser("toggle", help="Toggle a bookmark on a line")
    toggle.add_argument("file", help="File identifier")
    toggle.add_argument("line", type=_line, help="Line number (1-based)")
    toggle.add_argument("--content", default="", help="Line text snapshot")
    toggle.add_argument("--group", default=None, help="Target group (default: active)")

    remove = sub.add_parser("remove", help="Remove a bookmark")
    remove.add_argument("file")
    remove.add_argument("line", type=_line)
    remove.add_argument("--group", default=None)

    clear = sub.add_parser("clear", help="Clear all bookmarks of a group")
    clear.add_argument("--group", default=None)
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    lst = sub.add_parser("list", help="List bookmarks")
    scope = lst.add_mutually_exclusive_group()
    scope.add_argument("--group", default=None)
    scope.add_argument("--file", default=None)

    sub.add_parser("groups", help="List groups")

    create = sub.add_parser("create-group", help="Create a group")
    create.add_argument("name")
    create.add_argument("--no-activate", action="store_true", help="Keep the current active group")

    rename = sub.add_parser("rename-group", help="Rename a group")
    rename.add_argument("old")
    rename.add_argument("new")

    delete = sub.add_parser("delete-group", help="Delete a group and its bookmarks")
    delete.add_argument("name")
    delete.add_argument("--yes", action="store_true")

    activate = sub.add_parser("activate", help="Set the active group")
    activate.add_argument("name")

    move = sub.add_parser("move", help="Move a bookmark to another group")
    move.add_argument("file")
    move.add_argument("line", type=_line)
    move.add_argument("to", help="Target group")
    move.add_argument("--from", dest="from_group", default=None, help="Source group (default: active)")

    nxt = sub.add_parser("next", help="Next bookmark after a position")
    nxt.add_argument("file")
    nxt.add_argument("line", type=_line)

    prev = sub.add_parser("prev", help="Previous bookmark before a position")
    prev.add_argument("file")
    prev.add_argument("line", type=_line)

    edit = sub.add_parser("edit", help="Report a document edit (lines start..end replaced by text)")
    edit.add_argument("file")
    edit.add_argument("start", type=_line)
    edit.add_argument("end", type=_line)
    edit.add_argument("text")

    color = sub.add_parser("color", help="Override a group color in the settings file")
    color.add_argument("group")
    color.add_argument("color", help="#rrggbb")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = open_session(args.db, args.config)
    try:
        if args.command == "toggle":
            return run_toggle(session, args.file, args.line, args.content, args.group)
        elif args.command == "remove":
            return run_remove(session, args.file, args.line, args.group)
        elif args.command == "clear":
            return run_clear(session, args.group, args.yes, args.config)
        elif args.command == "list":
            return run_list(session, args.group, args.file)
        elif args.command == "groups":
            return run_groups(session)
        elif args.command == "create-group":
            return run_create_group(session, args.name, not args.no_activate)
        elif args.command == "rename-group":
            return run_rename_group(session, args.old, args.new)
        elif args.command == "delete-group":
            return run_delete_group(session, args.name, args.yes, args.config)
        elif args.command == "activate":
            return run_activate(session, args.name)
        elif args.command == "move":
            return run_move(session, args.file, args.line, args.to, args.from_group)
        elif args.command == "next":
            return run_next(session, args.file, args.line)
        elif args.command == "prev":
            return run_prev(session, args.file, args.line)
        elif args.command == "edit":
            return run_edit(session, args.file, args.start, args.end, args.text)
        elif args.command == "color":
            return run_set_color(session, args.config, args.group, args.color)
    finally:
        session.teardown()
    return 1


if __name__ == "__main__":
    sys.exit(main())
