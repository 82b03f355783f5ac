"""gRPC bindings for ``api.CloudControllerCopilot``.

Provides ``CloudControllerCopilotStub`` for clients, and
``CloudControllerCopilotServicer`` / ``add_servicer_to_server`` for in-process
servers (the fake server used in tests). Bindings are derived from the service
descriptor in :mod:`cfcopilot.api.messages`.
"""
from __future__ import annotations

import grpc

from . import messages


def method_path(rpc: str) -> str:
    return f"/{messages.SERVICE_NAME}/{rpc}"


class CloudControllerCopilotStub:
    """Client stub: one unary-unary callable attribute per procedure."""

    def __init__(self, channel: grpc.Channel) -> None:
        for method in messages.SERVICE_DESCRIPTOR.methods:
            request_cls = messages.message_class(method.input_type.name)
            response_cls = messages.message_class(method.output_type.name)
            setattr(
                self,
                method.name,
                channel.unary_unary(
                    method_path(method.name),
                    request_serializer=request_cls.SerializeToString,
                    response_deserializer=response_cls.FromString,
                ),
            )


class CloudControllerCopilotServicer:
    """Base servicer; every procedure answers UNIMPLEMENTED until overridden."""

    def _unimplemented(self, context: grpc.ServicerContext):  # noqa: ANN202
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")

    def Health(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def UpsertRoute(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def DeleteRoute(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def MapRoute(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def UnmapRoute(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def UpsertCapiDiegoProcessAssociation(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def DeleteCapiDiegoProcessAssociation(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def BulkSync(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def ListCfRoutes(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def ListCfRouteMappings(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)

    def ListCapiDiegoProcessAssociations(self, request, context):  # noqa: N802, ANN001, ANN201
        return self._unimplemented(context)


def add_servicer_to_server(servicer: CloudControllerCopilotServicer, server: grpc.Server) -> None:
    handlers = {}
    for method in messages.SERVICE_DESCRIPTOR.methods:
        request_cls = messages.message_class(method.input_type.name)
        response_cls = messages.message_class(method.output_type.name)
        handlers[method.name] = grpc.unary_unary_rpc_method_handler(
            getattr(servicer, method.name),
            request_deserializer=request_cls.FromString,
            response_serializer=response_cls.SerializeToString,
        )
    generic = grpc.method_handlers_generic_handler(messages.SERVICE_NAME, handlers)
    server.add_generic_rpc_handlers((generic,))
