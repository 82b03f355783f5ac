from __future__ import annotations

import pickle
import socket
import threading

import grpc
import pytest

from cfcopilot import Client, RemoteCallError


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_invalid_argument_is_structured(client, handlers):
    handlers.fail("UpsertRoute", grpc.StatusCode.INVALID_ARGUMENT, "route Guid and Host are required")

    with pytest.raises(RemoteCallError) as ei:
        client.upsert_route(guid="", host="")

    err = ei.value
    assert err.method == "UpsertRoute"
    assert err.code == grpc.StatusCode.INVALID_ARGUMENT
    assert err.classification == "invalid_argument"
    assert err.details == "route Guid and Host are required"
    assert isinstance(err.__cause__, grpc.RpcError)
    assert "INVALID_ARGUMENT" in str(err)


def test_timeout_is_deadline_exceeded_and_client_stays_usable(make_client, handlers):
    client = make_client(timeout=0.2)
    handlers.delay = 1.0

    with pytest.raises(RemoteCallError) as ei:
        client.delete_route(guid="r1")
    assert ei.value.code == grpc.StatusCode.DEADLINE_EXCEEDED

    handlers.delay = 0.0
    assert client.check_health() is True


def test_unreachable_server_is_unavailable(pki):
    client = Client(
        host="127.0.0.1",
        port=_unused_port(),
        client_ca=pki.ca_cert,
        client_key=pki.client_key,
        client_chain=pki.client_cert,
        timeout=2.0,
        server_name="localhost",
    )
    with client:
        with pytest.raises(RemoteCallError) as ei:
            client.check_health()
    assert ei.value.code == grpc.StatusCode.UNAVAILABLE


def test_untrusted_client_certificate_is_rejected(pki, fake_server):
    from cfcopilot.testing.pki import issue_certificates

    other = issue_certificates()
    # trusts the real server CA but presents a client cert from a foreign CA
    client = Client(
        host=fake_server.host,
        port=fake_server.port,
        client_ca=pki.ca_cert,
        client_key=other.client_key,
        client_chain=other.client_cert,
        timeout=2.0,
        server_name="localhost",
    )
    with client:
        with pytest.raises(RemoteCallError) as ei:
            client.check_health()
    # the handshake failure surfaces as a transport-level status
    assert ei.value.code in (grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.UNKNOWN, grpc.StatusCode.INTERNAL)


def test_concurrent_calls_share_one_channel(client, handlers):
    errors: list[BaseException] = []

    def worker(i: int) -> None:
        try:
            client.upsert_route(guid=f"r{i}", host=f"h{i}.example.com")
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert handlers.call_count("UpsertRoute") == 16
    assert len(client.list_routes()) == 16


def test_remote_call_error_from_plain_rpc_error():
    err = RemoteCallError.from_rpc_error("Health", grpc.RpcError())
    assert err.code == grpc.StatusCode.UNKNOWN
    assert err.details == ""
    assert err.metadata == ()


def test_remote_call_error_pickles():
    err = RemoteCallError("MapRoute", grpc.StatusCode.INTERNAL, "boom", (("k", "v"),))
    again = pickle.loads(pickle.dumps(err))
    assert again.code == grpc.StatusCode.INTERNAL
    assert again.metadata == (("k", "v"),)


def test_server_metadata_reaches_the_error(client, handlers):
    handlers.fail(
        "MapRoute",
        grpc.StatusCode.INTERNAL,
        "duplicate mapping",
        metadata=(("x-copilot-reason", "dup"),),
    )

    with pytest.raises(RemoteCallError) as ei:
        client.map_route(capi_process_guid="p1", route_guid="r1")

    err = ei.value
    assert err.code == grpc.StatusCode.INTERNAL
    assert ("x-copilot-reason", "dup") in err.metadata
    assert "x-copilot-reason" in str(err)
    assert "dup" in str(err)
