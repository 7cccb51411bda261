from unittest.mock import MagicMock

from conftest import DummyResp
from Pianoacademy.services.push_service import NOTICE_TITLE, PushNotifier, PushStatus


def _notifier(config, remote=None, token_provider=None):
    return PushNotifier(config, remote=remote, token_provider=token_provider, session=MagicMock())


def test_registration_without_provider_returns_none(config):
    assert _notifier(config).register_for_push_notifications() is None
    assert _notifier(config, token_provider=lambda: "ExponentPushToken[a]").register_for_push_notifications() \
        == "ExponentPushToken[a]"


def test_send_filters_invalid_tokens(config):
    notifier = _notifier(config)
    notifier.session.post.return_value = DummyResp(200, {"data": [{"status": "ok"}]})
    result = notifier.send_push_notification(["ExponentPushToken[a]", "bogus", None], {"title": "t", "body": "b"})
    assert result["status"] is PushStatus.SENT
    messages = notifier.session.post.call_args.kwargs["json"]
    assert [m["to"] for m in messages] == ["ExponentPushToken[a]"]


def test_send_without_valid_tokens_skips_gateway(config):
    notifier = _notifier(config)
    assert notifier.send_push_notification("bogus", {})["status"] is PushStatus.FAILED
    notifier.session.post.assert_not_called()


def test_gateway_error_is_reported(config):
    notifier = _notifier(config)
    notifier.session.post.return_value = DummyResp(500, text="boom", reason="Server Error")
    assert notifier.send_push_notification("ExponentPushToken[a]", {})["message"] == "HTTP 500"


def test_token_stored_by_user_type(config, remote):
    remote.update_student.return_value = {"success": True}
    remote.set_user.return_value = {"success": True}
    notifier = _notifier(config, remote=remote)
    assert notifier.save_push_token("s1", "ExponentPushToken[a]")
    remote.update_student.assert_called_once()
    assert notifier.save_push_token("t1", "ExponentPushToken[b]", user_type="teacher")
    assert remote.set_user.call_args.kwargs["merge"] is True


def test_notice_notification_collects_student_tokens(config, remote):
    remote.get_student_by_id.side_effect = [
        {"success": True, "data": {"pushToken": "ExponentPushToken[a]"}},
        {"success": True, "data": {}},
    ]
    notifier = _notifier(config, remote=remote)
    notifier.session.post.return_value = DummyResp(200, {"data": []})
    result = notifier.send_notice_notification(["s1", "s2"], "발표회 안내")
    assert result["status"] is PushStatus.SENT
    message = notifier.session.post.call_args.kwargs["json"][0]
    assert message["title"] == NOTICE_TITLE
    assert message["body"] == "발표회 안내"


def test_notice_notification_disabled_without_remote(config):
    assert _notifier(config).send_notice_notification(["s1"], "t")["status"] is PushStatus.DISABLED
