"""Cloud Controller client for the copilot route control plane.

Every operation builds one request message, sends it over the shared mutual
TLS channel and returns the typed response. Failures surface as
:class:`~cfcopilot.core.errors.RemoteCallError`; nothing is retried, logged
or swallowed here.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import grpc

from .api import messages
from .config import DEFAULT_TIMEOUT, ClientConfig, ClientSettings
from .core.errors import RemoteCallError
from .core.models import ProcessAssociation, Route, RouteMapping
from .telemetry.metrics import Timer
from .telemetry.prom import RPC_SECONDS, RPC_TOTAL
from .transport.channel import Connection, LazyConnection, open_secure
from .transport.tls import CredentialSource, channel_credentials

RouteLike = Union[Route, Mapping[str, Any]]
RouteMappingLike = Union[RouteMapping, Mapping[str, Any]]
ProcessAssociationLike = Union[ProcessAssociation, Mapping[str, Any]]


def _route_message(route: RouteLike):  # noqa: ANN202
    r = Route.coerce(route)
    msg = messages.Route(guid=r.guid, host=r.host)
    if r.path:
        msg.path = r.path
    return msg


def _mapping_message(mapping: RouteMappingLike):  # noqa: ANN202
    m = RouteMapping.coerce(mapping)
    return messages.RouteMapping(capi_process_guid=m.capi_process_guid, route_guid=m.route_guid)


def _association_message(association: ProcessAssociationLike):  # noqa: ANN202
    a = ProcessAssociation.coerce(association)
    return messages.CapiDiegoProcessAssociation(
        capi_process_guid=a.capi_process_guid,
        diego_process_guids=list(a.diego_process_guids),
    )


class Client:
    def __init__(
        self,
        host: str,
        port: int,
        client_ca: CredentialSource,
        client_key: CredentialSource,
        client_chain: CredentialSource,
        timeout: float = DEFAULT_TIMEOUT,
        server_name: Optional[str] = None,
        channel_options: Optional[list[tuple[str, object]]] = None,
    ) -> None:
        self._config = ClientConfig.build(
            host=host,
            port=port,
            client_ca=client_ca,
            client_key=client_key,
            client_chain=client_chain,
            timeout=timeout,
            server_name=server_name,
            channel_options=channel_options,
        )
        self._conn = LazyConnection(self._connect)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Client":
        return cls(
            host=config.host,
            port=config.port,
            client_ca=config.client_ca,
            client_key=config.client_key,
            client_chain=config.client_chain,
            timeout=config.timeout,
            server_name=config.server_name,
            channel_options=[tuple(o) for o in config.channel_options],
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "Client":
        return cls.from_config(settings.client_config())

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def timeout(self) -> float:
        return self._config.timeout

    # -- connection lifecycle -------------------------------------------------

    def _connect(self) -> Connection:
        cfg = self._config
        creds = channel_credentials(cfg.client_ca, cfg.client_key, cfg.client_chain)
        return open_secure(
            cfg.target,
            creds,
            server_name=cfg.server_name,
            options=[tuple(o) for o in cfg.channel_options],
        )

    def close(self) -> None:
        """Close the cached channel. A later call opens a new one."""
        self._conn.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def _invoke(self, method: str, request):  # noqa: ANN001, ANN202
        call = getattr(self._conn.get().stub, method)
        code = grpc.StatusCode.OK
        try:
            with Timer(method, RPC_SECONDS, {"method": method}):
                return call(request, timeout=self._config.timeout)
        except grpc.RpcError as e:
            err = RemoteCallError.from_rpc_error(method, e)
            code = err.code
            raise err from e
        finally:
            RPC_TOTAL.inc(method=method, code=code.name)

    # -- operations -------------------------------------------------------------

    def check_health(self) -> bool:
        return bool(self._invoke("Health", messages.HealthRequest()).healthy)

    def upsert_route(self, guid: str, host: str, path: Optional[str] = None):  # noqa: ANN201
        request = messages.UpsertRouteRequest(route=_route_message(Route(guid, host, path)))
        return self._invoke("UpsertRoute", request)

    def delete_route(self, guid: str):  # noqa: ANN201
        return self._invoke("DeleteRoute", messages.DeleteRouteRequest(guid=guid))

    def map_route(self, capi_process_guid: str, route_guid: str):  # noqa: ANN201
        mapping = _mapping_message(RouteMapping(capi_process_guid, route_guid))
        return self._invoke("MapRoute", messages.MapRouteRequest(route_mapping=mapping))

    def unmap_route(self, capi_process_guid: str, route_guid: str):  # noqa: ANN201
        mapping = _mapping_message(RouteMapping(capi_process_guid, route_guid))
        return self._invoke("UnmapRoute", messages.UnmapRouteRequest(route_mapping=mapping))

    def upsert_process_association(
        self, capi_process_guid: str, diego_process_guids: Iterable[str]
    ):  # noqa: ANN201
        association = _association_message(ProcessAssociation(capi_process_guid, diego_process_guids))
        request = messages.UpsertCapiDiegoProcessAssociationRequest(
            capi_diego_process_association=association
        )
        return self._invoke("UpsertCapiDiegoProcessAssociation", request)

    def delete_process_association(self, capi_process_guid: str):  # noqa: ANN201
        request = messages.DeleteCapiDiegoProcessAssociationRequest(capi_process_guid=capi_process_guid)
        return self._invoke("DeleteCapiDiegoProcessAssociation", request)

    def bulk_sync(
        self,
        routes: Sequence[RouteLike],
        route_mappings: Sequence[RouteMappingLike],
        process_associations: Sequence[ProcessAssociationLike] = (),
    ):  # noqa: ANN201
        """Send the full desired state in one request.

        Experimental: the server-side contract is still moving.
        """
        request = messages.BulkSyncRequest(
            routes=[_route_message(r) for r in routes],
            route_mappings=[_mapping_message(m) for m in route_mappings],
            capi_diego_process_associations=[_association_message(a) for a in process_associations],
        )
        return self._invoke("BulkSync", request)

    # Read-only debugging views of the server's state.

    def list_routes(self) -> Dict[str, str]:
        resp = self._invoke("ListCfRoutes", messages.ListCfRoutesRequest())
        return dict(resp.routes)

    def list_route_mappings(self) -> Dict[str, RouteMapping]:
        resp = self._invoke("ListCfRouteMappings", messages.ListCfRouteMappingsRequest())
        return {
            key: RouteMapping(capi_process_guid=m.capi_process_guid, route_guid=m.route_guid)
            for key, m in resp.route_mappings.items()
        }

    def list_process_associations(self) -> Dict[str, List[str]]:
        resp = self._invoke(
            "ListCapiDiegoProcessAssociations", messages.ListCapiDiegoProcessAssociationsRequest()
        )
        return {
            key: list(guids.diego_process_guids)
            for key, guids in resp.capi_diego_process_associations.items()
        }
