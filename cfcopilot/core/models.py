"""Immutable route-management values passed to the client.

These mirror the message shapes of the ``api`` schema but carry no wire
concerns; the client converts them to protobuf messages per call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Union


def _require(value: Any, key: str, kind: str) -> Any:
    if not isinstance(value, Mapping):
        raise TypeError(f"{kind} must be a mapping, got {type(value).__name__}")
    try:
        return value[key]
    except KeyError:
        raise ValueError(f"{kind} is missing {key!r}") from None


@dataclass(frozen=True, slots=True)
class Route:
    guid: str
    host: str
    path: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["Route", Mapping[str, Any]]) -> "Route":
        if isinstance(value, cls):
            return value
        guid = _require(value, "guid", "route")
        return cls(guid=guid, host=_require(value, "host", "route"), path=value.get("path"))


@dataclass(frozen=True, slots=True)
class RouteMapping:
    capi_process_guid: str
    route_guid: str

    @classmethod
    def coerce(cls, value: Union["RouteMapping", Mapping[str, Any]]) -> "RouteMapping":
        if isinstance(value, cls):
            return value
        return cls(
            capi_process_guid=_require(value, "capi_process_guid", "route mapping"),
            route_guid=_require(value, "route_guid", "route mapping"),
        )


@dataclass(frozen=True, slots=True)
class ProcessAssociation:
    capi_process_guid: str
    diego_process_guids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # a bare string would otherwise be split into characters
        if isinstance(self.diego_process_guids, (str, bytes)):
            raise TypeError("diego_process_guids must be an iterable of guids, not a single string")
        object.__setattr__(self, "diego_process_guids", tuple(self.diego_process_guids))

    @classmethod
    def coerce(
        cls, value: Union["ProcessAssociation", Mapping[str, Any]]
    ) -> "ProcessAssociation":
        if isinstance(value, cls):
            return value
        capi = _require(value, "capi_process_guid", "process association")
        guids: Iterable[str] = value.get("diego_process_guids") or ()
        return cls(capi_process_guid=capi, diego_process_guids=guids)
