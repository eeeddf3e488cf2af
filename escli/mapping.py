"""Turn parsed commands into HTTP request descriptors.

Nothing here performs I/O: ``resolve_base_url`` picks the address to talk to and
``map_command`` produces the request the transport should send, or raises a
``MappingError`` before anything leaves the process.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .commands import Command, Family, OperationArgs, RequestDescriptor
from .config import ConnectionSettings, ProxySettings
from .errors import MissingArgument, OperationNotImplemented, UnsupportedOperation

LOOPBACK_HOST = "127.0.0.1"
DEFAULT_DOCUMENT_TYPE = "_doc"
JSON_HEADERS = {"Content-Type": "application/json"}

# Accepted spellings per family, folded onto a canonical operation name.
INDEX_OPERATIONS = {
    "create": "create",
    "put": "create",
    "read": "read",
    "get": "read",
    "update": "update",
    "delete": "delete",
}
DOCUMENT_OPERATIONS = {
    "create": "create",
    "read": "search",
    "search": "search",
    "update": "update",
    "delete": "delete",
}
SEARCH_OPERATIONS = {"post": "search"}


def resolve_base_url(connection: ConnectionSettings, proxy: Optional[ProxySettings] = None) -> str:
    """Return the cluster address, or the loopback end of the SSH forward when enabled."""

    if proxy is not None and proxy.enabled:
        return f"{proxy.protocol}://{LOOPBACK_HOST}:{proxy.port}"
    return f"{connection.protocol}://{connection.host}:{connection.port}"


def _join(base_url: str, *segments: str) -> str:
    return "/".join([base_url.rstrip("/"), *segments])


def _canonical(args: OperationArgs, table: Dict[str, str], family: Family) -> str:
    name = (args.operation or "").strip().lower()
    try:
        return table[name]
    except KeyError:
        raise UnsupportedOperation(args.operation, family.value) from None


def _require(value: Optional[str], field_name: str, context: str, allow_empty: bool = False) -> str:
    # path segments must be non-empty; bodies may be empty
    if value is None or (not value and not allow_empty):
        raise MissingArgument(field_name, context)
    return value


def _map_info(args: OperationArgs, base_url: str) -> RequestDescriptor:
    return RequestDescriptor("GET", base_url)


def _map_index(args: OperationArgs, base_url: str) -> RequestDescriptor:
    operation = _canonical(args, INDEX_OPERATIONS, Family.INDEX)
    if operation == "update":
        raise OperationNotImplemented("index update")

    index = _require(args.index_name, "index_name", f"index {operation}")
    url = _join(base_url, index)
    if operation == "create":
        body = args.body if args.body is not None else "{}"
        return RequestDescriptor("PUT", url, body, dict(JSON_HEADERS))
    if operation == "read":
        return RequestDescriptor("GET", url)
    return RequestDescriptor("DELETE", url)


def _map_search(args: OperationArgs, base_url: str, context: str) -> RequestDescriptor:
    index = _require(args.index_name, "index_name", context)
    body = args.body if args.body is not None else ""
    return RequestDescriptor("POST", _join(base_url, index, "_search"), body)


def _map_document(args: OperationArgs, base_url: str) -> RequestDescriptor:
    operation = _canonical(args, DOCUMENT_OPERATIONS, Family.DOCUMENT)
    context = f"document {operation}"
    if operation == "search":
        return _map_search(args, base_url, context)

    index = _require(args.index_name, "index_name", context)
    if operation == "create":
        body = _require(args.body, "body", context, allow_empty=True)
        return RequestDescriptor("POST", _join(base_url, index, "_doc"), body, dict(JSON_HEADERS))
    if operation == "update":
        body = _require(args.body, "body", context, allow_empty=True)
        doc_id = _require(args.document_id, "document_id", context)
        return RequestDescriptor(
            "POST", _join(base_url, index, "_update", doc_id), body, dict(JSON_HEADERS)
        )

    doc_type = args.document_type or DEFAULT_DOCUMENT_TYPE
    doc_id = _require(args.document_id, "document_id", context)
    return RequestDescriptor("DELETE", _join(base_url, index, doc_type, doc_id))


def _map_search_family(args: OperationArgs, base_url: str) -> RequestDescriptor:
    _canonical(args, SEARCH_OPERATIONS, Family.SEARCH)
    return _map_search(args, base_url, "search")


_HANDLERS: Dict[Family, Callable[[OperationArgs, str], RequestDescriptor]] = {
    Family.INFO: _map_info,
    Family.INDEX: _map_index,
    Family.DOCUMENT: _map_document,
    Family.SEARCH: _map_search_family,
}


def map_command(command: Command, base_url: str) -> RequestDescriptor:
    """Build the request for ``command`` against ``base_url``.

    Raises MissingArgument, OperationNotImplemented or UnsupportedOperation
    when the command cannot be expressed as a request.
    """

    handler = _HANDLERS[Family(command.family)]
    return handler(command.args, base_url)


__all__ = [
    "LOOPBACK_HOST",
    "DEFAULT_DOCUMENT_TYPE",
    "INDEX_OPERATIONS",
    "DOCUMENT_OPERATIONS",
    "SEARCH_OPERATIONS",
    "resolve_base_url",
    "map_command",
]
