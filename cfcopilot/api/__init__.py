"""Wire schema and gRPC bindings for the copilot Cloud Controller API."""

from . import messages
from .service import CloudControllerCopilotServicer, CloudControllerCopilotStub, add_servicer_to_server

__all__ = [
    "messages",
    "CloudControllerCopilotStub",
    "CloudControllerCopilotServicer",
    "add_servicer_to_server",
]
