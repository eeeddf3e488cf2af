"""Minimal Elasticsearch HTTP transport that executes request descriptors."""

from __future__ import annotations

from typing import Any, Optional

import requests

from .commands import RequestDescriptor
from .config import ConnectionSettings
from .errors import TransportError

ERROR_BODY_LIMIT = 300


class ESClient:
    """Thin wrapper around a requests session; one request per call, no retries."""

    def __init__(
        self,
        username: Optional[str],
        password: Optional[str],
        verify_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.session = requests.Session()
        self.verify = bool(verify_tls)
        self.timeout = timeout

        if username and password:
            self.session.auth = (username, password)

    @classmethod
    def from_settings(cls, connection: ConnectionSettings) -> "ESClient":
        return cls(
            username=connection.username,
            password=connection.password,
            verify_tls=connection.verify_tls,
            timeout=connection.timeout,
        )

    def execute(self, request: RequestDescriptor) -> Any:
        """Send ``request`` and return the decoded JSON body."""

        try:
            response = self.session.request(
                request.method,
                request.url,
                data=request.body.encode("utf-8") if request.body is not None else None,
                headers=dict(request.headers),
                verify=self.verify,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        if response.status_code >= 300:
            raise TransportError(
                f"{request.method} {request.url} returned {response.status_code}: "
                f"{(response.text or '')[:ERROR_BODY_LIMIT]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"{request.method} {request.url} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

    def close(self) -> None:
        self.session.close()


__all__ = ["ESClient", "ERROR_BODY_LIMIT"]
