"""Client configuration.

``ClientConfig`` is the validated, immutable configuration a ``Client`` is
built from. ``ClientSettings`` is the on-disk JSON form used by the CLI and
deployments, holding file paths instead of credential bytes.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.errors import ConfigurationError
from .transport.tls import CredentialSource, read_credential, validate_credentials

DEFAULT_TIMEOUT = 5.0


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    client_ca: bytes
    client_key: bytes
    client_chain: bytes
    server_name: Optional[str] = None
    channel_options: Tuple[Tuple[str, Any], ...] = ()

    @property
    def target(self) -> str:
        host = self.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"  # bare IPv6 literal
        return f"{host}:{self.port}"

    @classmethod
    def build(
        cls,
        host: str,
        port: int,
        client_ca: CredentialSource,
        client_key: CredentialSource,
        client_chain: CredentialSource,
        timeout: float = DEFAULT_TIMEOUT,
        server_name: Optional[str] = None,
        channel_options: Optional[list[tuple[str, object]]] = None,
    ) -> "ClientConfig":
        """Resolve and validate everything; raise ConfigurationError on any problem."""
        ca = read_credential(client_ca, "client CA bundle")
        key = read_credential(client_key, "client key")
        chain = read_credential(client_chain, "client certificate chain")
        validate_credentials(ca, key, chain)
        try:
            return cls(
                host=host,
                port=port,
                timeout=timeout,
                client_ca=ca,
                client_key=key,
                client_chain=chain,
                server_name=server_name,
                channel_options=tuple(tuple(o) for o in (channel_options or ())),
            )
        except ValidationError as e:
            raise ConfigurationError(f"invalid client config: {_describe(e)}") from e


class ClientSettings(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    client_ca_path: Path
    client_key_path: Path
    client_chain_path: Path
    server_name: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("server_name")
    @classmethod
    def _blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def client_config(self) -> ClientConfig:
        return ClientConfig.build(
            host=self.host,
            port=self.port,
            timeout=self.timeout,
            client_ca=self.client_ca_path,
            client_key=self.client_key_path,
            client_chain=self.client_chain_path,
            server_name=self.server_name,
        )


def load_settings(path: str | Path) -> ClientSettings:
    p = Path(path)
    try:
        raw = json.loads(p.read_text())
    except OSError as e:
        raise ConfigurationError(f"reading config {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"parsing config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"parsing config {p}: expected a JSON object")
    try:
        return ClientSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"invalid config {p}: {_describe(e)}") from e
