"""Command and request data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Family(str, Enum):
    """Operation family selected by the CLI subcommand."""

    INFO = "info"
    INDEX = "index"
    DOCUMENT = "document"
    SEARCH = "search"


DEFAULT_OPERATIONS = {
    Family.INFO: "read",
    Family.INDEX: "read",
    Family.DOCUMENT: "read",
    Family.SEARCH: "post",
}


@dataclass(frozen=True)
class OperationArgs:
    """Arguments attached to a command; which ones are required depends on the operation."""

    index_name: Optional[str] = None
    body: Optional[str] = None
    document_id: Optional[str] = None
    document_type: Optional[str] = None
    operation: str = "read"
    page: Optional[int] = None


@dataclass(frozen=True)
class Command:
    family: Family
    args: OperationArgs = field(default_factory=OperationArgs)


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully specified outbound HTTP request."""

    method: str
    url: str
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "body": self.body,
            "headers": dict(self.headers),
        }


__all__ = [
    "Family",
    "DEFAULT_OPERATIONS",
    "OperationArgs",
    "Command",
    "RequestDescriptor",
]
