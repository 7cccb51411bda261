import logging
from enum import Enum
from datetime import datetime, timezone

import requests

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "피아노 학원"
NOTICE_TITLE = "새 알림장이 도착했어요 📝"
TOKEN_PREFIX = "ExponentPushToken"


class PushStatus(Enum):
    SENT = "sent"
    FAILED = "failed"
    DISABLED = "disabled"


class PushNotifier:
    """Best-effort push delivery through the Expo push gateway.

    ``token_provider`` returns this device's push token; without one
    registration yields None. Without a remote service, sending notices
    returns ``PushStatus.DISABLED``.
    """

    def __init__(self, config, remote=None, token_provider=None, session=None):
        self.gateway_url = config.push_gateway_url
        self.timeout = config.request_timeout
        self.remote = remote
        self.token_provider = token_provider
        self.session = session or requests.Session()

    def is_enabled(self) -> bool:
        return self.token_provider is not None

    def register_for_push_notifications(self):
        if not self.is_enabled():
            logger.info("Push notifications unavailable on this device")
            return None
        try:
            return self.token_provider()
        except Exception as e:
            logger.warning("Push token registration failed: %s", e)
            return None

    def save_push_token(self, user_id, token, user_type="parent") -> bool:
        """Parents store the token on their child's student document, teachers on their profile."""
        if not user_id or not token or self.remote is None:
            return False
        data = {
            "pushToken": token,
            "pushTokenUpdatedAt": datetime.now(timezone.utc).isoformat(),
        }
        if user_type == "teacher":
            result = self.remote.set_user(user_id, data, merge=True)
        else:
            result = self.remote.update_student(user_id, data)
        if not result.get("success"):
            logger.error("Saving push token failed: %s", result.get("error"))
            return False
        return True

    def send_push_notification(self, push_tokens, notification):
        tokens = push_tokens if isinstance(push_tokens, (list, tuple)) else [push_tokens]
        valid = [t for t in tokens if t and str(t).startswith(TOKEN_PREFIX)]
        if not valid:
            logger.info("No valid push tokens")
            return {"status": PushStatus.FAILED, "message": "No valid tokens"}

        messages = [
            {
                "to": token,
                "sound": "default",
                "title": notification.get("title") or DEFAULT_TITLE,
                "body": notification.get("body") or "",
                "data": notification.get("data") or {},
                "badge": 1,
            }
            for token in valid
        ]
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        try:
            response = self.session.post(self.gateway_url, headers=headers, json=messages, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Push send failed: %s", e)
            return {"status": PushStatus.FAILED, "message": str(e)}

        if response.status_code != 200:
            logger.error("Push gateway returned %s: %s", response.status_code, response.text)
            return {"status": PushStatus.FAILED, "message": f"HTTP {response.status_code}"}

        logger.info("Push sent to %d device(s)", len(valid))
        return {"status": PushStatus.SENT, "message": "sent", "result": response.json()}

    def get_student_push_tokens(self, student_ids):
        if self.remote is None:
            return []
        tokens = []
        for student_id in student_ids:
            result = self.remote.get_student_by_id(student_id)
            token = (result.get("data") or {}).get("pushToken") if result.get("success") else None
            if token:
                tokens.append(token)
        return tokens

    def send_notice_notification(self, student_ids, notice_title):
        if self.remote is None:
            return {"status": PushStatus.DISABLED, "message": "push disabled"}
        tokens = self.get_student_push_tokens(student_ids)
        if not tokens:
            return {"status": PushStatus.FAILED, "message": "No tokens"}
        return self.send_push_notification(tokens, {
            "title": NOTICE_TITLE,
            "body": notice_title,
            "data": {"type": "notice", "screen": "NoticeScreen"},
        })
