"""Command-line client for the Elasticsearch REST API."""

from .mapping import map_command, resolve_base_url
from .runner import main

__all__ = ["main", "map_command", "resolve_base_url"]
