"""
Tests for gateway and client settings
"""

import pytest
from pydantic import ValidationError

from app.config import Settings
from frontend.config import ClientSettings


def test_gateway_defaults(monkeypatch):
    monkeypatch.delenv("OPENPECHA_ENDPOINT", raising=False)
    monkeypatch.delenv("PORT", raising=False)

    settings = Settings()

    assert settings.port == 3000
    assert settings.default_text_limit == 30
    assert settings.default_person_limit == 10


def test_endpoint_from_environment(monkeypatch):
    monkeypatch.setenv("OPENPECHA_ENDPOINT", " https://api.openpecha.test/v2/ ")

    assert Settings().openpecha_endpoint == "https://api.openpecha.test/v2"


def test_endpoint_must_be_http():
    with pytest.raises(ValidationError):
        Settings(openpecha_endpoint="ftp://openpecha.test")


def test_port_range():
    with pytest.raises(ValidationError):
        Settings(port=70000)


def test_cors_origins():
    settings = Settings(cors_allowed_origins="http://a.test, http://b.test,")

    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]


def test_client_server_url_from_vite_variable(monkeypatch):
    monkeypatch.setenv("VITE_SERVER_URL", "http://gateway.test:3000/")

    assert ClientSettings().server_url == "http://gateway.test:3000"


def test_client_defaults(monkeypatch):
    monkeypatch.delenv("VITE_SERVER_URL", raising=False)
    monkeypatch.delenv("SERVER_URL", raising=False)

    settings = ClientSettings()

    assert settings.server_url == "http://localhost:3000"
    assert settings.stale_time == 300
    assert settings.query_retry == 1


def test_client_retry_not_negative():
    with pytest.raises(ValidationError):
        ClientSettings(query_retry=-1)
