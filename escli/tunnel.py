"""SSH port forwarding to reach a cluster that is only visible from a jump host."""

from __future__ import annotations

import subprocess
from typing import Callable, List, Optional

from .config import Config, ConnectionSettings, ProxySettings
from .errors import TunnelError

SSH_BINARY = "ssh"


def build_tunnel_command(connection: ConnectionSettings, proxy: ProxySettings) -> List[str]:
    """Return the ssh argv forwarding ``proxy.port`` locally to the cluster address.

    ``-f`` backgrounds ssh once forwarding is up; the remote ``sleep`` closes
    the tunnel after ``proxy.timeout`` seconds.
    """

    return [
        SSH_BINARY,
        "-i",
        proxy.key,
        f"{proxy.remote_user}@{proxy.host}",
        "-f",
        "-o",
        "ExitOnForwardFailure=yes",
        "-L",
        f"{proxy.port}:{connection.host}:{connection.port}",
        f"sleep {proxy.timeout};",
    ]


def open_tunnel(
    config: Config,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> Optional[subprocess.CompletedProcess]:
    """Start the forward when the proxy is enabled; return None otherwise."""

    proxy = config.proxy
    if proxy is None or not proxy.enabled:
        return None

    argv = build_tunnel_command(config.elastic, proxy)
    try:
        completed = run(argv, check=False)
    except OSError as exc:
        raise TunnelError(f"could not start {SSH_BINARY}: {exc}") from exc

    if completed.returncode != 0:
        raise TunnelError(
            f"{SSH_BINARY} exited with status {completed.returncode} while forwarding "
            f"127.0.0.1:{proxy.port} -> {config.elastic.host}:{config.elastic.port}"
        )
    return completed


__all__ = ["SSH_BINARY", "build_tunnel_command", "open_tunnel"]
