"""Protobuf messages for the copilot Cloud Controller API (package ``api``).

The schema is declared here as a ``FileDescriptorProto`` and loaded into a
private descriptor pool, so no protoc step is needed at build time. Field
names and numbers follow ``cloud_controller.proto`` on the server side.
"""
from __future__ import annotations

from typing import Dict, Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "api"
SERVICE_NAME = f"{PACKAGE}.CloudControllerCopilot"

_F = descriptor_pb2.FieldDescriptorProto
_STRING = _F.TYPE_STRING
_BOOL = _F.TYPE_BOOL
_MESSAGE = _F.TYPE_MESSAGE
_OPTIONAL = _F.LABEL_OPTIONAL
_REPEATED = _F.LABEL_REPEATED


def _ref(name: str) -> str:
    return f".{PACKAGE}.{name}"


def _field(
    msg: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    ftype: int = _STRING,
    label: int = _OPTIONAL,
    type_name: Optional[str] = None,
) -> None:
    f = msg.field.add()
    f.name = name
    f.number = number
    f.type = ftype
    f.label = label
    if type_name:
        f.type_name = type_name


def _map_field(
    msg: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    value_type: int = _STRING,
    value_type_name: Optional[str] = None,
) -> None:
    # Maps are repeated nested "<CamelName>Entry" messages flagged map_entry,
    # named the way protoc names them.
    entry_name = "".join(part.capitalize() for part in name.split("_")) + "Entry"
    entry = msg.nested_type.add()
    entry.name = entry_name
    entry.options.map_entry = True
    _field(entry, "key", 1)
    _field(entry, "value", 2, value_type, type_name=value_type_name)
    _field(msg, name, number, _MESSAGE, _REPEATED, _ref(f"{msg.name}.{entry_name}"))


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto()
    fdp.name = "api/cloud_controller.proto"
    fdp.package = PACKAGE
    fdp.syntax = "proto3"

    def message(name: str) -> descriptor_pb2.DescriptorProto:
        m = fdp.message_type.add()
        m.name = name
        return m

    message("HealthRequest")
    _field(message("HealthResponse"), "healthy", 1, _BOOL)

    route = message("Route")
    _field(route, "guid", 1)
    _field(route, "host", 2)
    _field(route, "path", 3)

    mapping = message("RouteMapping")
    _field(mapping, "capi_process_guid", 1)
    _field(mapping, "route_guid", 2)

    assoc = message("CapiDiegoProcessAssociation")
    _field(assoc, "capi_process_guid", 1)
    _field(assoc, "diego_process_guids", 2, label=_REPEATED)

    _field(message("DiegoProcessGuids"), "diego_process_guids", 1, label=_REPEATED)

    _field(message("UpsertRouteRequest"), "route", 1, _MESSAGE, type_name=_ref("Route"))
    message("UpsertRouteResponse")
    _field(message("DeleteRouteRequest"), "guid", 1)
    message("DeleteRouteResponse")
    _field(message("MapRouteRequest"), "route_mapping", 1, _MESSAGE, type_name=_ref("RouteMapping"))
    message("MapRouteResponse")
    _field(message("UnmapRouteRequest"), "route_mapping", 1, _MESSAGE, type_name=_ref("RouteMapping"))
    message("UnmapRouteResponse")
    _field(
        message("UpsertCapiDiegoProcessAssociationRequest"),
        "capi_diego_process_association",
        1,
        _MESSAGE,
        type_name=_ref("CapiDiegoProcessAssociation"),
    )
    message("UpsertCapiDiegoProcessAssociationResponse")
    _field(message("DeleteCapiDiegoProcessAssociationRequest"), "capi_process_guid", 1)
    message("DeleteCapiDiegoProcessAssociationResponse")

    bulk = message("BulkSyncRequest")
    _field(bulk, "route_mappings", 1, _MESSAGE, _REPEATED, _ref("RouteMapping"))
    _field(bulk, "routes", 2, _MESSAGE, _REPEATED, _ref("Route"))
    _field(
        bulk,
        "capi_diego_process_associations",
        3,
        _MESSAGE,
        _REPEATED,
        _ref("CapiDiegoProcessAssociation"),
    )
    message("BulkSyncResponse")

    message("ListCfRoutesRequest")
    _map_field(message("ListCfRoutesResponse"), "routes", 1)
    message("ListCfRouteMappingsRequest")
    _map_field(
        message("ListCfRouteMappingsResponse"),
        "route_mappings",
        1,
        _MESSAGE,
        _ref("RouteMapping"),
    )
    message("ListCapiDiegoProcessAssociationsRequest")
    _map_field(
        message("ListCapiDiegoProcessAssociationsResponse"),
        "capi_diego_process_associations",
        1,
        _MESSAGE,
        _ref("DiegoProcessGuids"),
    )

    service = fdp.service.add()
    service.name = SERVICE_NAME.rsplit(".", 1)[-1]
    for rpc in RPC_NAMES:
        m = service.method.add()
        m.name = rpc
        m.input_type = _ref(f"{rpc}Request")
        m.output_type = _ref(f"{rpc}Response")
    return fdp


# Unary procedures of api.CloudControllerCopilot; each uses <Name>Request /
# <Name>Response.
RPC_NAMES = (
    "Health",
    "UpsertRoute",
    "DeleteRoute",
    "MapRoute",
    "UnmapRoute",
    "UpsertCapiDiegoProcessAssociation",
    "DeleteCapiDiegoProcessAssociation",
    "BulkSync",
    "ListCfRoutes",
    "ListCfRouteMappings",
    "ListCapiDiegoProcessAssociations",
)

POOL = descriptor_pool.DescriptorPool()
POOL.AddSerializedFile(_build_file().SerializeToString())
SERVICE_DESCRIPTOR = POOL.FindServiceByName(SERVICE_NAME)

_CLASSES: Dict[str, type] = {}


def message_class(name: str) -> type:
    """Return the generated message class for ``api.<name>``."""
    cls = _CLASSES.get(name)
    if cls is None:
        cls = message_factory.GetMessageClass(POOL.FindMessageTypeByName(f"{PACKAGE}.{name}"))
        _CLASSES[name] = cls
    return cls


HealthRequest = message_class("HealthRequest")
HealthResponse = message_class("HealthResponse")
Route = message_class("Route")
RouteMapping = message_class("RouteMapping")
CapiDiegoProcessAssociation = message_class("CapiDiegoProcessAssociation")
DiegoProcessGuids = message_class("DiegoProcessGuids")
UpsertRouteRequest = message_class("UpsertRouteRequest")
UpsertRouteResponse = message_class("UpsertRouteResponse")
DeleteRouteRequest = message_class("DeleteRouteRequest")
DeleteRouteResponse = message_class("DeleteRouteResponse")
MapRouteRequest = message_class("MapRouteRequest")
MapRouteResponse = message_class("MapRouteResponse")
UnmapRouteRequest = message_class("UnmapRouteRequest")
UnmapRouteResponse = message_class("UnmapRouteResponse")
UpsertCapiDiegoProcessAssociationRequest = message_class("UpsertCapiDiegoProcessAssociationRequest")
UpsertCapiDiegoProcessAssociationResponse = message_class("UpsertCapiDiegoProcessAssociationResponse")
DeleteCapiDiegoProcessAssociationRequest = message_class("DeleteCapiDiegoProcessAssociationRequest")
DeleteCapiDiegoProcessAssociationResponse = message_class("DeleteCapiDiegoProcessAssociationResponse")
BulkSyncRequest = message_class("BulkSyncRequest")
BulkSyncResponse = message_class("BulkSyncResponse")
ListCfRoutesRequest = message_class("ListCfRoutesRequest")
ListCfRoutesResponse = message_class("ListCfRoutesResponse")
ListCfRouteMappingsRequest = message_class("ListCfRouteMappingsRequest")
ListCfRouteMappingsResponse = message_class("ListCfRouteMappingsResponse")
ListCapiDiegoProcessAssociationsRequest = message_class("ListCapiDiegoProcessAssociationsRequest")
ListCapiDiegoProcessAssociationsResponse = message_class("ListCapiDiegoProcessAssociationsResponse")
