"""Lazily opened, shared gRPC channel."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

import grpc

from ..api.service import CloudControllerCopilotStub


@dataclass(frozen=True)
class Connection:
    channel: grpc.Channel
    stub: CloudControllerCopilotStub


class LazyConnection:
    """One-time-initialised connection cell.

    The factory runs at most once per open/close cycle even when several
    threads race on the first call. The lock only guards construction; RPCs
    never run under it.
    """

    def __init__(self, factory: Callable[[], Connection]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._conn: Optional[Connection] = None

    def get(self) -> Connection:
        conn = self._conn
        if conn is not None:
            return conn
        with self._lock:
            if self._conn is None:
                self._conn = self._factory()
            return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            conn.channel.close()


def open_secure(
    target: str,
    credentials: grpc.ChannelCredentials,
    server_name: Optional[str] = None,
    options: Optional[list[tuple[str, object]]] = None,
) -> Connection:
    opts = list(options or [])
    if server_name:
        opts.append(("grpc.ssl_target_name_override", server_name))
    channel = grpc.secure_channel(target, credentials, options=opts)
    return Connection(channel=channel, stub=CloudControllerCopilotStub(channel))
