"""
Email/password authentication against the Firebase Auth REST API,
with the profile mirrored in the ``users`` collection.

Results follow the ``{"success": bool, ...}`` shape; failures carry a
localized ``error`` and the provider's ``errorCode``.
"""
import logging
import threading
from datetime import datetime, timezone

import requests

from Pianoacademy.data import storage
from Pianoacademy.errors import NETWORK_ERROR_MESSAGE, LOGIN_REQUIRED_MESSAGE
from Pianoacademy.services.subscription import Subscription

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{action}"

ERROR_MESSAGES = {
    "INVALID_EMAIL": "잘못된 이메일 주소입니다.",
    "USER_DISABLED": "비활성화된 계정입니다.",
    "EMAIL_NOT_FOUND": "존재하지 않는 계정입니다.",
    "INVALID_PASSWORD": "비밀번호가 올바르지 않습니다.",
    "EMAIL_EXISTS": "이미 사용 중인 이메일입니다.",
    "WEAK_PASSWORD": "비밀번호는 최소 6자 이상이어야 합니다.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "너무 많은 요청이 발생했습니다. 잠시 후 다시 시도해주세요.",
    "INVALID_LOGIN_CREDENTIALS": "잘못된 인증 정보입니다.",
    "OPERATION_NOT_ALLOWED": "이 작업은 허용되지 않습니다.",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "보안을 위해 다시 로그인해주세요.",
    "NETWORK_ERROR": NETWORK_ERROR_MESSAGE,
}
DEFAULT_AUTH_ERROR = "오류가 발생했습니다. 다시 시도해주세요."


def get_error_message(code) -> str:
    # provider codes can carry a suffix: "WEAK_PASSWORD : Password should be ..."
    key = (code or "").split(" ")[0].strip()
    return ERROR_MESSAGES.get(key, DEFAULT_AUTH_ERROR)


class AuthError(Exception):
    def __init__(self, code):
        super().__init__(code)
        self.code = code


class AuthService:

    def __init__(self, config, remote, session=None):
        self.api_key = config.firebase_api_key
        self.timeout = config.request_timeout
        self.remote = remote
        self.session = session or requests.Session()
        self._user = None
        self._id_token = None
        self._listeners = []
        self._lock = threading.Lock()

    # --- transport ---

    def _call(self, action, payload):
        url = IDENTITY_TOOLKIT_URL.format(action=action)
        try:
            response = self.session.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Auth %s network error: %s", action, e)
            raise AuthError("NETWORK_ERROR")
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code != 200:
            code = (body.get("error") or {}).get("message") or str(response.status_code)
            logger.error("Auth %s failed: %s", action, code)
            raise AuthError(code)
        return body

    def _failure(self, label, error):
        logger.error("%s error: %s", label, error.code)
        return {"success": False, "error": get_error_message(error.code), "errorCode": error.code}

    # --- session state ---

    def _set_user(self, user, id_token=None):
        with self._lock:
            self._user = user
            self._id_token = id_token if user else None
            listeners = list(self._listeners)
        if user:
            if id_token:
                storage.set_auth_token(id_token)
            storage.set_user_data(user)
        else:
            storage.remove_auth_token()
            storage.remove_user_data()
        for listener in listeners:
            try:
                listener(user)
            except Exception as e:
                logger.error("Auth state listener failed: %s", e)

    def _profile(self, uid):
        result = self.remote.get_user(uid)
        return result.get("data") if result.get("success") else None

    # --- operations ---

    def login_with_email(self, email, password):
        try:
            body = self._call("signInWithPassword", {
                "email": email,
                "password": password,
                "returnSecureToken": True,
            })
        except AuthError as e:
            return self._failure("Login", e)

        uid = body["localId"]
        profile = self._profile(uid)
        if profile is not None:
            self.remote.set_user(uid, {"lastLoginAt": datetime.now(timezone.utc)})
        user = {
            "uid": uid,
            "email": body.get("email", email),
            "displayName": body.get("displayName"),
            **(profile or {}),
        }
        user.pop("id", None)
        self._set_user(user, body.get("idToken"))
        return {"success": True, "user": user}

    def register_with_email(self, email, password, user_data):
        try:
            body = self._call("signUp", {
                "email": email,
                "password": password,
                "returnSecureToken": True,
            })
        except AuthError as e:
            return self._failure("Registration", e)

        uid = body["localId"]
        now = datetime.now(timezone.utc)
        profile = {
            "email": body.get("email", email),
            "role": "parent",
            "photoURL": None,
            "phone": None,
            **user_data,
            "createdAt": now,
            "lastLoginAt": now,
        }
        saved = self.remote.set_user(uid, profile, merge=False)
        if not saved.get("success"):
            logger.error("Profile document for %s was not written: %s", uid, saved.get("error"))
        user = {
            "uid": uid,
            "email": profile["email"],
            "displayName": user_data.get("name"),
            "role": profile["role"],
        }
        self._set_user(user, body.get("idToken"))
        return {"success": True, "user": user}

    def logout(self):
        self._set_user(None)
        return {"success": True}

    def send_password_reset(self, email):
        try:
            self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
        except AuthError as e:
            return self._failure("Password reset", e)
        return {"success": True}

    def change_password(self, current_password, new_password):
        user = self.get_current_user()
        if not user:
            return {"success": False, "error": LOGIN_REQUIRED_MESSAGE, "errorCode": "NO_USER"}
        try:
            # re-authenticate before touching credentials
            body = self._call("signInWithPassword", {
                "email": user["email"],
                "password": current_password,
                "returnSecureToken": True,
            })
            updated = self._call("update", {
                "idToken": body["idToken"],
                "password": new_password,
                "returnSecureToken": True,
            })
        except AuthError as e:
            return self._failure("Change password", e)
        self._set_user(user, updated.get("idToken") or body["idToken"])
        return {"success": True}

    def update_user_profile(self, user_id, profile_data):
        result = self.remote.set_user(user_id, profile_data, merge=True)
        if not result.get("success"):
            return {"success": False, "error": result.get("error", DEFAULT_AUTH_ERROR)}
        current = self.get_current_user()
        if current and current.get("uid") == user_id:
            self._set_user({**current, **profile_data}, self._id_token)
        return {"success": True}

    def get_current_user(self):
        with self._lock:
            if self._user is not None:
                return self._user
        return storage.get_user_data()

    def get_user_data(self, uid=None):
        uid = uid or (self.get_current_user() or {}).get("uid")
        if not uid:
            return {"success": False, "error": LOGIN_REQUIRED_MESSAGE}
        return self.remote.get_user(uid)

    def on_auth_state_change(self, callback):
        """Call ``callback(user_or_None)`` now and on every sign-in/out."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        callback(self.get_current_user())
        return Subscription("auth_state", unsubscribe)
