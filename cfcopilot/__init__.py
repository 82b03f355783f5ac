"""Cloud Controller client for the copilot route control plane."""

from .client import Client
from .config import ClientConfig, ClientSettings, load_settings
from .core.errors import ConfigurationError, CopilotError, RemoteCallError, StartupTimeoutError
from .core.models import ProcessAssociation, Route, RouteMapping
from .health import wait_until_healthy

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientConfig",
    "ClientSettings",
    "load_settings",
    "CopilotError",
    "ConfigurationError",
    "RemoteCallError",
    "StartupTimeoutError",
    "Route",
    "RouteMapping",
    "ProcessAssociation",
    "wait_until_healthy",
]
