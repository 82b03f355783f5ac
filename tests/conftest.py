from __future__ import annotations

import pytest

from cfcopilot import Client
from cfcopilot.testing.fake_server import FakeCopilotHandlers, FakeCopilotServer
from cfcopilot.testing.pki import issue_certificates


@pytest.fixture(scope="session")
def pki():
    return issue_certificates()


@pytest.fixture(scope="session")
def fixtures_dir(pki, tmp_path_factory):
    d = tmp_path_factory.mktemp("fixtures")
    pki.write(d)
    return d


@pytest.fixture
def handlers() -> FakeCopilotHandlers:
    return FakeCopilotHandlers()


@pytest.fixture
def fake_server(pki, handlers):
    server = FakeCopilotServer(handlers, pki.server_key, pki.server_cert, pki.ca_cert)
    with server:
        yield server


@pytest.fixture
def make_client(pki, fake_server):
    clients: list[Client] = []

    def _make(**kwargs) -> Client:  # noqa: ANN003
        kwargs.setdefault("timeout", 5.0)
        c = Client(
            host=fake_server.host,
            port=fake_server.port,
            client_ca=pki.ca_cert,
            client_key=pki.client_key,
            client_chain=pki.client_cert,
            server_name="localhost",
            **kwargs,
        )
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def client(make_client) -> Client:
    return make_client()
