"""Command-line parsing for the escli entry point."""

from __future__ import annotations

import argparse
from typing import List, Optional

from .commands import DEFAULT_OPERATIONS, Command, Family, OperationArgs

OPERATION_CHOICES = ["create", "read", "search", "update", "delete", "get", "post", "put", "options"]

_FAMILY_HELP = {
    Family.INFO: "cluster info: always a GET on the base url",
    Family.INDEX: "index operations: create (put), read (get), update, delete",
    Family.DOCUMENT: "document operations: create, read/search, update, delete",
    Family.SEARCH: "search documents in an index: only post is enabled",
}


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid page: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"page must be >= 0, got {number}")
    return number


def _command_arguments() -> argparse.ArgumentParser:
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("index_name", nargs="?", help="index name or alias")
    shared.add_argument("body", nargs="?", help="json body of the request")
    shared.add_argument("id", nargs="?", help="id of a document")
    shared.add_argument("-o", "--operation", "-m", "--method", dest="operation", choices=OPERATION_CHOICES,
                        type=str.lower, help="crud operation or http method")
    shared.add_argument("-t", "--type", dest="type_name", help="document type (default: _doc)")
    shared.add_argument("-p", "--page", type=_non_negative_int, help="pagination (accepted, not traversed)")
    return shared


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the escli entry point."""

    parser = argparse.ArgumentParser(
        prog="escli",
        description="Send info, index and document requests to an Elasticsearch cluster.",
    )
    parser.add_argument("-c", "--config", metavar="DIRECTORY",
                        help="dir containing settings.toml / .secrets.toml")
    parser.add_argument("--dry-run", action="store_true", help="print the request instead of sending it")
    parser.add_argument("--verbose", action="store_true", help="echo the outgoing request to stderr")

    shared = _command_arguments()
    subparsers = parser.add_subparsers(dest="family", metavar="COMMAND", required=True)
    for family in Family:
        subparsers.add_parser(family.value, parents=[shared], help=_FAMILY_HELP[family])
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def build_command(args: argparse.Namespace) -> Command:
    """Convert parsed CLI arguments into the immutable Command."""

    family = Family(args.family)
    operation = args.operation or DEFAULT_OPERATIONS[family]
    return Command(
        family=family,
        args=OperationArgs(
            index_name=args.index_name,
            body=args.body,
            document_id=args.id,
            document_type=args.type_name,
            operation=operation,
            page=args.page,
        ),
    )


__all__ = ["OPERATION_CHOICES", "build_arg_parser", "parse_args", "build_command"]
