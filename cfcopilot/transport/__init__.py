"""Transport layer: credential handling and the shared gRPC channel."""

from .channel import Connection, LazyConnection, open_secure
from .tls import channel_credentials, read_credential, validate_credentials

__all__ = [
    "Connection",
    "LazyConnection",
    "open_secure",
    "channel_credentials",
    "read_credential",
    "validate_credentials",
]
