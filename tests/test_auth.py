"""Tests for the API key check."""

import pytest

from llama_gateway.config import config

BODY = {"messages": [{"role": "user", "content": "hi"}]}


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(config, "API_KEY", "secret-key")
    return "secret-key"


def test_open_when_no_key_configured(client):
    assert client.post("/v1/chat/completions", json=BODY).status_code == 200


@pytest.mark.parametrize("route", ["/v1/chat/completions", "/v1/messages"])
def test_missing_key_is_rejected(client, stub_service, api_key, route):
    response = client.post(route, json=BODY)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert stub_service.prompts == []


def test_wrong_key_is_rejected(client, api_key):
    response = client.post("/v1/chat/completions", json=BODY, headers={"x-api-key": "nope"})
    assert response.status_code == 401


@pytest.mark.parametrize(
    "headers",
    [
        {"x-api-key": "secret-key"},
        {"Authorization": "Bearer secret-key"},
        {"Authorization": "bearer secret-key"},
        {"Authorization": "secret-key"},
    ],
)
def test_accepted_key_headers(client, api_key, headers):
    response = client.post("/v1/messages", json=BODY, headers=headers)
    assert response.status_code == 200


def test_info_endpoints_stay_open(client, api_key):
    assert client.get("/health").status_code == 200
    assert client.get("/v1/models").status_code == 200


def test_auth_runs_before_validation(client, api_key):
    response = client.post("/v1/chat/completions", json={})
    assert response.status_code == 401


def test_non_ascii_key_is_rejected(client, api_key):
    response = client.post(
        "/v1/chat/completions", json=BODY, headers={"x-api-key": "café".encode("latin-1")}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_non_ascii_configured_key(client, monkeypatch):
    monkeypatch.setattr(config, "API_KEY", "clé-secrète")
    rejected = client.post("/v1/chat/completions", json=BODY, headers={"x-api-key": "other"})
    assert rejected.status_code == 401
