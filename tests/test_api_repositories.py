from unittest.mock import MagicMock

import pytest

from conftest import DummyResp, NEW_ENTITIES
from Pianoacademy.errors import NotFoundError, ServerError
from Pianoacademy.repositories import build_repositories
from Pianoacademy.services.api_client import ApiClient


class Backend:
    """In-memory REST double.

    POST to a collection stores the body, GET returns it by path, anything else is a 404.
    """

    def __init__(self):
        self.records = {}
        self.calls = []

    def __call__(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url.split("/api/v1", 1)[1]
        self.calls.append((method, path))
        if method == "POST" and path.count("/") == 1:
            record = {**json, "id": str(len(self.records) + 1), "createdAt": "2025-01-13T10:00:00"}
            self.records[f"{path}/{record['id']}"] = record
            return DummyResp(201, record)
        if method == "GET" and path in self.records:
            return DummyResp(200, self.records[path])
        return DummyResp(404, {"message": "리소스를 찾을 수 없습니다"}, reason="Not Found")


@pytest.fixture
def backend():
    return Backend()


@pytest.fixture
def api(api_config, backend):
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = backend
    client = ApiClient(api_config, token_provider=lambda: "tok", session=session)
    return build_repositories(api_config, api_client=client)


@pytest.mark.parametrize("name", sorted(NEW_ENTITIES))
def test_create_then_get_by_id(api, backend, name):
    repo = getattr(api, name)
    created = repo.create(NEW_ENTITIES[name])
    assert created["id"] == "1"
    assert repo.get_by_id(created["id"]) == created
    assert [method for method, _ in backend.calls] == ["POST", "GET"]
    assert backend.calls[1][1].endswith("/1")


@pytest.mark.parametrize("name", sorted(NEW_ENTITIES))
def test_missing_record_raises_not_found(api, name):
    repo = getattr(api, name)
    with pytest.raises(NotFoundError) as info:
        repo.get_by_id("9")
    assert str(info.value) == repo.not_found_message
    with pytest.raises(NotFoundError):
        repo.update("9", {"memo": "x"})
    with pytest.raises(NotFoundError):
        repo.delete("9")


@pytest.mark.parametrize("name", sorted(NEW_ENTITIES))
def test_collection_404_stays_server_error(api, name):
    with pytest.raises(ServerError) as info:
        getattr(api, name).get_all()
    assert info.value.status_code == 404
    assert not isinstance(info.value, NotFoundError)


def test_progress_update_song_posts_to_song_path(api, backend):
    with pytest.raises(NotFoundError):
        api.progress.update_song("9", {"number": 1, "status": "completed"})
    assert backend.calls == [("POST", "/progress/9/songs")]
