from unittest.mock import MagicMock

import pytest
import requests

from conftest import DummyResp
from Pianoacademy.errors import ServerError, TransportError, NETWORK_ERROR_MESSAGE
from Pianoacademy.services.api_client import ApiClient
from Pianoacademy.services.endpoints import endpoint


def _client(api_config, response=None, side_effect=None, token="tok"):
    session = MagicMock()
    session.headers = {}
    session.request.return_value = response
    session.request.side_effect = side_effect
    return ApiClient(api_config, token_provider=lambda: token, session=session), session


def test_get_sends_bearer_token_and_returns_json(api_config):
    client, session = _client(api_config, DummyResp(200, [{"id": "1"}]))
    assert client.get("/students", params={"category": "초등"}) == [{"id": "1"}]
    _, kwargs = session.request.call_args
    method, url = session.request.call_args[0]
    assert method == "GET"
    assert url == "http://localhost:3000/api/v1/students"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert kwargs["params"] == {"category": "초등"}
    assert kwargs["timeout"] == api_config.request_timeout


def test_no_token_means_no_auth_header(api_config):
    client, session = _client(api_config, DummyResp(200, {}), token=None)
    client.get("/students")
    assert session.request.call_args[1]["headers"] == {}


def test_empty_body_returns_none(api_config):
    client, _ = _client(api_config, DummyResp(204))
    assert client.delete("/students/1") is None


def test_server_error_carries_status_and_message(api_config):
    client, _ = _client(api_config, DummyResp(404, {"message": "학생 없음"}, reason="Not Found"))
    with pytest.raises(ServerError) as info:
        client.get("/students/9")
    assert info.value.status_code == 404
    assert str(info.value) == "학생 없음"
    assert info.value.category == "server"


def test_server_error_falls_back_to_reason(api_config):
    client, _ = _client(api_config, DummyResp(500, text="boom", reason="Internal Server Error"))
    with pytest.raises(ServerError) as info:
        client.post("/students", json={"name": "x"})
    assert str(info.value) == "Internal Server Error"


def test_connection_error_is_transport_error(api_config):
    client, _ = _client(api_config, side_effect=requests.ConnectionError("down"))
    with pytest.raises(TransportError) as info:
        client.get("/students")
    assert str(info.value) == NETWORK_ERROR_MESSAGE
    assert info.value.category == "transport"


def test_timeout_is_transport_error(api_config):
    client, _ = _client(api_config, side_effect=requests.Timeout())
    with pytest.raises(TransportError):
        client.get("/students")


def test_endpoint_quotes_ids():
    assert endpoint("students", "detail", id="a/b") == "/students/a%2Fb"
    assert endpoint("parent", "gallery", child_id="1") == "/parent/1/gallery"
