import os
import tempfile
from unittest.mock import MagicMock

import pytest

# keep the import-time app data dir out of the user's home
os.environ.setdefault("PIANOACADEMY_DATA_DIR", tempfile.mkdtemp(prefix="pianoacademy-tests-"))

from Pianoacademy import paths  # noqa: E402
from Pianoacademy.config import DataConfig, DataMode  # noqa: E402
from Pianoacademy.data import MockDataset, create_tables  # noqa: E402
from Pianoacademy.repositories import build_repositories  # noqa: E402


# one valid new record per CRUD repository
NEW_ENTITIES = {
    "students": {"name": "오하늘", "category": "초등", "level": "초급", "schedule": "월/수 15:00",
                 "ticketType": "count", "ticketCount": 4},
    "attendance": {"studentId": "1", "studentName": "김지우", "date": "2025-01-13", "status": "present"},
    "notices": {"title": "휴원 안내", "content": "설 연휴 휴원합니다", "recipients": ["1"]},
    "payments": {"studentId": "1", "studentName": "김지우", "amount": 150000, "date": "2025-01-10"},
    "lesson_notes": {"studentId": "1", "date": "2025.01.13", "content": "스케일 연습"},
    "expenses": {"category": "TEXTBOOK", "amount": 30000, "date": "2025-01-15", "description": "교재"},
    "progress": {"studentId": "3", "studentName": "이민준", "book": {"name": "하농", "totalSongs": 60}},
}


class DummyResp:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = "json"
        else:
            self.text = ""
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class Clock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start=1_760_000_000.0):
        self.value = start

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "DB_PATH", tmp_path / "test.db")
    create_tables()
    return tmp_path / "test.db"


@pytest.fixture
def config():
    return DataConfig(mode=DataMode.MOCK, mock_network_delay=0)


@pytest.fixture
def api_config():
    return DataConfig(mode=DataMode.API, mock_network_delay=0)


@pytest.fixture
def firebase_config():
    return DataConfig(mode=DataMode.FIREBASE, mock_network_delay=0, firebase_project_id="demo")


@pytest.fixture
def dataset():
    return MockDataset()


@pytest.fixture
def repos(config, dataset):
    return build_repositories(config, dataset=dataset)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def remote():
    """RemoteDataService double; every call succeeds unless a test says otherwise."""
    return MagicMock()
