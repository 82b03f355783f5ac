from __future__ import annotations

import json

import grpc
import pytest

from cfcopilot import Client, ConfigurationError, load_settings
from cfcopilot.config import ClientConfig
from cfcopilot.testing.pki import issue_certificates


def _no_network(monkeypatch):
    def _boom(*args, **kwargs):  # noqa: ANN002, ANN003
        raise AssertionError("network channel opened during construction")

    monkeypatch.setattr(grpc, "secure_channel", _boom)


def _build(pki, **overrides):  # noqa: ANN003
    kwargs = dict(
        host="127.0.0.1",
        port=9000,
        client_ca=pki.ca_cert,
        client_key=pki.client_key,
        client_chain=pki.client_cert,
    )
    kwargs.update(overrides)
    return Client(**kwargs)


def test_valid_construction_opens_nothing(pki, monkeypatch):
    _no_network(monkeypatch)
    c = _build(pki)
    assert c.host == "127.0.0.1"
    assert c.port == 9000
    assert c.timeout == 5.0
    assert c.config.target == "127.0.0.1:9000"


@pytest.mark.parametrize(
    "overrides",
    [
        {"client_ca": b"not a pem"},
        {"client_chain": b"-----BEGIN CERTIFICATE-----\nnope\n-----END CERTIFICATE-----\n"},
        {"client_key": b"garbage"},
        {"client_ca": b""},
        {"port": 0},
        {"port": 70000},
        {"host": ""},
        {"timeout": 0},
    ],
)
def test_bad_input_raises_configuration_error(pki, monkeypatch, overrides):
    _no_network(monkeypatch)
    with pytest.raises(ConfigurationError):
        _build(pki, **overrides)


def test_missing_credential_file(pki, tmp_path, monkeypatch):
    _no_network(monkeypatch)
    with pytest.raises(ConfigurationError, match="reading client CA bundle"):
        _build(pki, client_ca=tmp_path / "missing.crt")


def test_key_must_match_certificate(pki, monkeypatch):
    _no_network(monkeypatch)
    other = issue_certificates()
    with pytest.raises(ConfigurationError, match="does not match"):
        _build(pki, client_key=other.client_key)


def test_credentials_from_paths_and_pem_text(pki, fixtures_dir):
    by_path = ClientConfig.build(
        host="localhost",
        port=1,
        client_ca=fixtures_dir / "fakeCA.crt",
        client_key=str(fixtures_dir / "cloud-controller-client.key"),
        client_chain=fixtures_dir / "cloud-controller-client.crt",
    )
    by_text = ClientConfig.build(
        host="localhost",
        port=1,
        client_ca=pki.ca_cert.decode(),
        client_key=pki.client_key,
        client_chain=pki.client_cert,
    )
    assert by_path.client_ca == by_text.client_ca == pki.ca_cert
    assert by_path.client_key == pki.client_key


def test_config_is_frozen(pki):
    cfg = ClientConfig.build("h", 1, pki.ca_cert, pki.client_key, pki.client_cert)
    with pytest.raises(Exception):
        cfg.port = 2  # type: ignore[misc]


def test_load_settings_round_trip(fixtures_dir, tmp_path, monkeypatch):
    _no_network(monkeypatch)
    path = tmp_path / "client.json"
    path.write_text(
        json.dumps(
            {
                "host": "copilot.service.internal",
                "port": 9001,
                "timeout": 2.5,
                "client_ca_path": str(fixtures_dir / "fakeCA.crt"),
                "client_key_path": str(fixtures_dir / "cloud-controller-client.key"),
                "client_chain_path": str(fixtures_dir / "cloud-controller-client.crt"),
            }
        )
    )
    settings = load_settings(path)
    client = Client.from_settings(settings)
    assert client.host == "copilot.service.internal"
    assert client.port == 9001
    assert client.timeout == 2.5


@pytest.mark.parametrize(
    "content",
    ["{not json", "[]", json.dumps({"host": "h"}), json.dumps({"host": "h", "port": 1, "bogus": 1})],
)
def test_load_settings_rejects_bad_files(tmp_path, content):
    path = tmp_path / "client.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="reading config"):
        load_settings(tmp_path / "nope.json")
