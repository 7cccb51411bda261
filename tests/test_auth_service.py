from unittest.mock import MagicMock

import pytest
import requests

from conftest import DummyResp
from Pianoacademy.data import storage
from Pianoacademy.services.auth_service import AuthService, get_error_message


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def auth(db, firebase_config, remote, session):
    remote.get_user.return_value = {"success": True, "data": {"id": "u1", "role": "teacher", "name": "김선생"}}
    remote.set_user.return_value = {"success": True}
    return AuthService(firebase_config, remote, session=session)


def test_error_codes_are_localized():
    assert get_error_message("INVALID_PASSWORD") == "비밀번호가 올바르지 않습니다."
    assert get_error_message("WEAK_PASSWORD : Password should be at least 6 characters") == \
        "비밀번호는 최소 6자 이상이어야 합니다."
    assert get_error_message("SOMETHING_NEW") == "오류가 발생했습니다. 다시 시도해주세요."


def test_login_merges_profile_and_persists(auth, session, remote):
    session.post.return_value = DummyResp(200, {"localId": "u1", "email": "t@academy.kr", "idToken": "tok"})
    result = auth.login_with_email("t@academy.kr", "secret")
    assert result["success"] is True
    assert result["user"]["uid"] == "u1"
    assert result["user"]["role"] == "teacher"
    assert "id" not in result["user"]
    assert storage.get_auth_token() == "tok"
    assert auth.get_current_user()["name"] == "김선생"
    remote.set_user.assert_called_once()


def test_login_failure_returns_code(auth, session):
    session.post.return_value = DummyResp(400, {"error": {"message": "INVALID_PASSWORD"}}, reason="Bad Request")
    result = auth.login_with_email("t@academy.kr", "wrong")
    assert result == {"success": False, "error": "비밀번호가 올바르지 않습니다.", "errorCode": "INVALID_PASSWORD"}
    assert storage.get_auth_token() is None


def test_network_error(auth, session):
    session.post.side_effect = requests.ConnectionError("down")
    result = auth.send_password_reset("t@academy.kr")
    assert result["success"] is False
    assert result["errorCode"] == "NETWORK_ERROR"


def test_register_defaults_to_parent(auth, session, remote):
    session.post.return_value = DummyResp(200, {"localId": "p1", "email": "p@academy.kr", "idToken": "tok"})
    result = auth.register_with_email("p@academy.kr", "secret1", {"name": "학부모"})
    assert result["user"]["role"] == "parent"
    profile = remote.set_user.call_args.args[1]
    assert profile["role"] == "parent"
    assert remote.set_user.call_args.kwargs["merge"] is False


def test_logout_notifies_listeners(auth, session):
    session.post.return_value = DummyResp(200, {"localId": "u1", "email": "t@academy.kr", "idToken": "tok"})
    seen = []
    handle = auth.on_auth_state_change(seen.append)
    auth.login_with_email("t@academy.kr", "secret")
    auth.logout()
    assert seen[0] is None
    assert seen[1]["uid"] == "u1"
    assert seen[-1] is None
    assert storage.get_user_data() is None
    handle.close()


def test_change_password_requires_user(auth):
    result = auth.change_password("old", "newpass1")
    assert result["errorCode"] == "NO_USER"
