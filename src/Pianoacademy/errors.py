"""Error taxonomy shared by every layer.

Repositories raise these, stores catch them at the action boundary and keep
``str(error)`` in their ``error`` field. ``category`` lets callers branch
without parsing message text.
"""

NETWORK_ERROR_MESSAGE = "네트워크 연결을 확인해주세요"
LOGIN_REQUIRED_MESSAGE = "로그인이 필요합니다"
DEFAULT_ERROR_MESSAGE = "An error occurred"


class AcademyError(Exception):
    category = "unknown"

    def __init__(self, message=DEFAULT_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class NotFoundError(AcademyError):
    category = "not_found"


class ValidationError(AcademyError):
    category = "validation"


class TransportError(AcademyError):
    category = "transport"

    def __init__(self, message=NETWORK_ERROR_MESSAGE, cause=None):
        super().__init__(message)
        self.cause = cause


class ServerError(AcademyError):
    category = "server"

    def __init__(self, message=DEFAULT_ERROR_MESSAGE, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class AuthRequiredError(AcademyError):
    category = "auth_required"

    def __init__(self, message=LOGIN_REQUIRED_MESSAGE):
        super().__init__(message)
