"""Credential material for the mutually authenticated channel.

Credentials are read once (bytes, PEM text or a file path) and parsed with
``cryptography`` so that bad material fails at construction time rather than
during the first TLS handshake.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Union

import grpc
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from ..core.errors import ConfigurationError

CredentialSource = Union[bytes, bytearray, str, "os.PathLike[str]"]

_PEM_MARKER = "-----BEGIN"


def read_credential(source: CredentialSource, what: str) -> bytes:
    """Return the raw bytes of a credential artifact.

    ``bytes`` are taken as content; a ``str`` holding a PEM block is content
    too; any other ``str`` or path-like is a file to read.
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    elif isinstance(source, str) and source.lstrip().startswith(_PEM_MARKER):
        data = source.encode("ascii", errors="replace")
    elif isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ConfigurationError(f"reading {what} from {path}: {e}") from e
    else:
        raise ConfigurationError(f"{what}: expected bytes or a file path, got {type(source).__name__}")
    if not data.strip():
        raise ConfigurationError(f"{what} is empty")
    return data


def _load_certificates(data: bytes, what: str) -> list[x509.Certificate]:
    try:
        certs = x509.load_pem_x509_certificates(data)
    except ValueError as e:
        raise ConfigurationError(f"parsing {what}: {e}") from e
    if not certs:
        raise ConfigurationError(f"parsing {what}: no certificates found")
    return certs


def _public_der(key) -> bytes:  # noqa: ANN001
    return key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )


def validate_credentials(ca_bundle: bytes, client_key: bytes, client_chain: bytes) -> None:
    """Parse the three artifacts and check that the key belongs to the chain's leaf."""
    _load_certificates(ca_bundle, "client CA bundle")
    chain = _load_certificates(client_chain, "client certificate chain")
    try:
        key = serialization.load_pem_private_key(client_key, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigurationError(f"parsing client key: {e}") from e
    if _public_der(key.public_key()) != _public_der(chain[0].public_key()):
        raise ConfigurationError("client key does not match the client certificate")


def channel_credentials(ca_bundle: bytes, client_key: bytes, client_chain: bytes) -> grpc.ChannelCredentials:
    return grpc.ssl_channel_credentials(
        root_certificates=ca_bundle,
        private_key=client_key,
        certificate_chain=client_chain,
    )
