from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import session as session_mod
from .config import load_settings
from .errors import ConfEditError, UnknownFormatError
from .formats import known_suffixes
from .log import enable_debug
from .paths import settings_file, state_file
from .search import find_line
from .state import load_last_file


def _load(path: Path) -> session_mod.Document:
    doc = session_mod.open(path)
    if doc.adapter is None:
        raise UnknownFormatError(
            f"No format for {path.suffix or path.name!r}; expected one of "
            + ", ".join(known_suffixes())
        )
    return doc


def open_cmd(args: argparse.Namespace) -> int:
    path = args.path or load_last_file()
    if path is None:
        print("No file given and no previously opened file remembered.", file=sys.stderr)
        return 1
    path = Path(path)
    if not path.is_file():
        print(f"No such file: {path}", file=sys.stderr)
        return 1
    from .ui.tk import launch

    launch(path, remember=not args.no_remember)
    return 0


def show_cmd(args: argparse.Namespace) -> int:
    doc = _load(Path(args.path))
    if doc.parse_error is not None:
        print(f"Invalid {doc.format_name}: {doc.parse_error}", file=sys.stderr)
        return 1
    print(json.dumps(doc.parsed, indent=2, ensure_ascii=False))
    return 0


def find_cmd(args: argparse.Namespace) -> int:
    doc = session_mod.open(Path(args.path))
    line = find_line(doc.raw_text, args.query)
    if line is None:
        print(f"{args.query!r} not found", file=sys.stderr)
        return 1
    row_height = args.row_height or load_settings().row_height
    print(f"line {line} offset {line * row_height:g}")
    return 0


def where_cmd(args: argparse.Namespace) -> int:
    print(f"settings: {settings_file()}")
    print(f"state:    {state_file()}")
    last = load_last_file()
    print(f"last:     {last if last is not None else '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="confedit", description="Edit YAML, JSON and TOML files as a tree."
    )
    parser.add_argument("--debug", action="store_true", help="Log to stderr")
    subparsers = parser.add_subparsers(dest="command")

    p_open = subparsers.add_parser("open", help="Open a file in the editor window.")
    p_open.add_argument("path", nargs="?", type=Path)
    p_open.add_argument("--no-remember", action="store_true")
    p_open.set_defaults(func=open_cmd)

    p_show = subparsers.add_parser("show", help="Print the parsed tree as JSON.")
    p_show.add_argument("path", type=Path)
    p_show.set_defaults(func=show_cmd)

    p_find = subparsers.add_parser("find", help="Locate QUERY in the raw text.")
    p_find.add_argument("path", type=Path)
    p_find.add_argument("query")
    p_find.add_argument("--row-height", type=float)
    p_find.set_defaults(func=find_cmd)

    p_where = subparsers.add_parser("where", help="Show state and settings paths.")
    p_where.set_defaults(func=where_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.debug:
        enable_debug()
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except ConfEditError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
