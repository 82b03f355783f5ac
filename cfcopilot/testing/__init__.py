"""Test support: health gate, fake and real copilot servers, throwaway PKI."""

from .fake_server import FakeCopilotHandlers, FakeCopilotServer
from .harness import CopilotTestHarness
from .pki import CertificateBundle, issue_certificates
from .real_server import CopilotServerConfig, RealCopilotServer

__all__ = [
    "FakeCopilotHandlers",
    "FakeCopilotServer",
    "CopilotTestHarness",
    "CertificateBundle",
    "issue_certificates",
    "CopilotServerConfig",
    "RealCopilotServer",
]
