# Minimal CLI using argparse to inspect and edit a Kwik data directory.
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from pprint import pformat

from kwik.core.config import KwikConfig
from kwik.core.errors import DocumentNotFoundError, KwikError
from kwik.core.store import Kwik


def parse_where(items: list[str]) -> dict[str, object]:
    """Turn ``key=value`` strings into an exact-match filter.

    Values are read as JSON when possible, otherwise kept as strings.
    """
    fields: dict[str, object] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {item!r}")
        try:
            fields[key] = json.loads(raw)
        except json.JSONDecodeError:
            fields[key] = raw
    return fields


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kwik", description="Inspect a Kwik document store")
    p.add_argument("--data-dir", type=Path, default=Path("db"), help="Store root directory")
    p.add_argument("--extension", default="kwik", help="Document file extension")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("tables", help="List tables and their document counts")

    dump = sub.add_parser("dump", help="Print documents of a table")
    dump.add_argument("table")
    dump.add_argument(
        "--where",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Only documents whose field equals VALUE (repeatable)",
    )

    get = sub.add_parser("get", help="Print one document")
    get.add_argument("table")
    get.add_argument("id")

    delete = sub.add_parser("delete", help="Delete one document")
    delete.add_argument("table")
    delete.add_argument("id")

    return p


def list_tables(kwik: Kwik) -> list[str]:
    """Table names are the subdirectories of the store root."""
    if not kwik.directory_path.is_dir():
        return []
    return sorted(p.name for p in kwik.directory_path.iterdir() if p.is_dir())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    kwik = Kwik(KwikConfig(data_dir=str(args.data_dir), extension=args.extension))

    if args.command == "tables":
        for name in list_tables(kwik):
            print(f"{name}\t{len(kwik.table(name))}")
        return 0

    table = kwik.table(args.table)

    if args.command == "dump":
        try:
            where = parse_where(args.where)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
        for doc_id, value in table.find_many(where).items():
            print(f"{doc_id}: {pformat(value)}")
        return 0

    if args.command == "get":
        try:
            value = table.fetch(args.id)
        except DocumentNotFoundError:
            print(f"No document {args.id!r} in table {args.table!r}", file=sys.stderr)
            return 1
        except KwikError as e:
            print(f"Error reading {args.id!r}: {e}", file=sys.stderr)
            return 1
        print(pformat(value))
        return 0

    if args.command == "delete":
        if not table.delete(args.id):
            return 1
        print(f"Deleted {args.id!r} from {args.table!r}")
        return 0

    parser.error(f"Unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
