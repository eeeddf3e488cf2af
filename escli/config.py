"""Layered configuration for the cluster connection and the optional SSH proxy.

Sources, lowest precedence first:

* field defaults on ``ConnectionSettings``
* ``settings.toml`` in the configuration directory
* ``.secrets.toml`` in the same directory
* ``ESCLI_<SECTION>__<KEY>`` environment variables (pydantic-settings)

A file may either hold ``[elastic]``/``[proxy]`` tables directly or split them
into environment sections (``[default.elastic]``, ``[production.elastic]``);
the active section is picked by ``ESCLI_ENV``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .errors import ConfigError

SETTINGS_FILENAME = "settings.toml"
SECRETS_FILENAME = ".secrets.toml"
ENV_PREFIX = "ESCLI_"
ENV_SELECTOR = "ESCLI_ENV"
DEFAULT_ENVIRONMENT = "development"


class ConnectionSettings(BaseModel):
    """Direct address and credentials of the cluster."""

    model_config = ConfigDict(frozen=True)

    protocol: str = "http"
    host: str = "127.0.0.1"
    port: int = Field(default=9200, ge=1, le=65535)
    username: str = "elastic"
    password: str = "changeme"
    version: str = Field(default="8.8.0", description="Expected cluster version; informational.")
    verify_tls: bool = True
    timeout: float = Field(default=30.0, gt=0, description="Request timeout (seconds).")


class ProxySettings(BaseModel):
    """SSH jump host used to forward a local port to the cluster."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(ge=1, le=65535, description="Local port bound by the forward.")
    key: str = Field(description="Path of the ssh identity file.")
    remote_user: str
    enabled: bool = False
    protocol: str = "http"
    user: str = Field(
        default="",
        description="Local account name; informational only, ssh runs as the invoking user.",
    )
    timeout: int = Field(default=10, ge=0, description="Seconds before the remote side closes the tunnel.")


class Config(BaseSettings):
    """Resolved configuration; environment variables win over file values."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    elastic: ConnectionSettings = Field(default_factory=ConnectionSettings)
    proxy: Optional[ProxySettings] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # file values arrive as init kwargs
        return env_settings, init_settings


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def _select_environment(data: Dict[str, Any], environment: str) -> Dict[str, Any]:
    """Collapse ``[default]`` + ``[<environment>]`` sections when the file uses them."""

    if not data or "elastic" in data or "proxy" in data:
        return data
    if not all(isinstance(value, Mapping) for value in data.values()):
        return data
    return _deep_merge(dict(data.get("default", {})), data.get(environment, {}))


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"could not parse {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"could not read {path}: {exc}") from exc


def _read_directory(config_dir: Union[str, Path]) -> Dict[str, Any]:
    root = Path(config_dir).expanduser()
    existing = [path for path in (root / SETTINGS_FILENAME, root / SECRETS_FILENAME) if path.is_file()]
    if not root.is_dir() or not existing:
        raise ConfigError(f"{SETTINGS_FILENAME} and {SECRETS_FILENAME} not found in path {config_dir}")

    environment = os.environ.get(ENV_SELECTOR, DEFAULT_ENVIRONMENT)
    data: Dict[str, Any] = {}
    for path in existing:
        data = _deep_merge(data, _select_environment(_read_toml(path), environment))
    return data


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )


def load_configuration(config_dir: Optional[Union[str, Path]] = None) -> Config:
    """Return the merged configuration; raise ConfigError instead of exiting."""

    data = {} if config_dir is None else _read_directory(config_dir)
    try:
        return Config(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {_describe(exc)}") from exc


__all__ = [
    "SETTINGS_FILENAME",
    "SECRETS_FILENAME",
    "ENV_PREFIX",
    "ENV_SELECTOR",
    "DEFAULT_ENVIRONMENT",
    "ConnectionSettings",
    "ProxySettings",
    "Config",
    "load_configuration",
]
