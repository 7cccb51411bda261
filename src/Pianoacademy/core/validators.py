import re

from Pianoacademy.core.formatters import parse_date
from Pianoacademy.errors import ValidationError

_KOREAN_ONLY = re.compile(r"^[가-힣]+$")
_MOBILE = re.compile(r"^01[0-9]\d{7,8}$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
MAX_AMOUNT = 100_000_000


def _ok(message=""):
    return {"isValid": True, "message": message}


def _fail(message):
    return {"isValid": False, "message": message}


def _to_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    try:
        return int(str(value).replace(",", "").strip())
    except ValueError:
        return None


def validate_name(name):
    if not name or not name.strip():
        return _fail("이름을 입력해주세요.")
    name = name.strip()
    if len(name) < 2:
        return _fail("이름은 최소 2자 이상이어야 합니다.")
    if len(name) > 10:
        return _fail("이름은 최대 10자까지 입력 가능합니다.")
    if not _KOREAN_ONLY.match(name):
        return _fail("이름은 한글만 입력 가능합니다.")
    return _ok()


def validate_phone(phone):
    if not phone or not phone.strip():
        return _fail("전화번호를 입력해주세요.")
    if not _MOBILE.match(re.sub(r"\D", "", phone)):
        return _fail("올바른 전화번호 형식이 아닙니다. (예: 010-1234-5678)")
    return _ok()


def validate_email(email):
    if not email or not email.strip():
        return _fail("이메일을 입력해주세요.")
    if not _EMAIL.match(email):
        return _fail("올바른 이메일 형식이 아닙니다.")
    return _ok()


def validate_amount(amount):
    if amount is None or amount == "":
        return _fail("금액을 입력해주세요.")
    value = _to_int(amount)
    if value is None:
        return _fail("올바른 금액을 입력해주세요.")
    if not isinstance(value, int):
        return _fail("금액은 정수로 입력해주세요.")
    if value <= 0:
        return _fail("금액은 0보다 커야 합니다.")
    if value > MAX_AMOUNT:
        return _fail("금액이 너무 큽니다.")
    return _ok()


def validate_date(value):
    if not value:
        return _fail("날짜를 입력해주세요.")
    if parse_date(value) is None:
        return _fail("올바른 날짜 형식이 아닙니다.")
    return _ok()


def validate_password(password):
    if not password or not password.strip():
        return {"isValid": False, "message": "비밀번호를 입력해주세요.", "strength": "weak"}
    if len(password) < 8:
        return {"isValid": False, "message": "비밀번호는 최소 8자 이상이어야 합니다.", "strength": "weak"}
    criteria = sum([
        bool(re.search(r"[A-Z]", password)),
        bool(re.search(r"[a-z]", password)),
        bool(re.search(r"\d", password)),
        bool(_SPECIAL.search(password)),
    ])
    if criteria < 2:
        return {
            "isValid": False,
            "message": "비밀번호는 영문 대소문자, 숫자, 특수문자 중 2가지 이상을 포함해야 합니다.",
            "strength": "weak",
        }
    if criteria == 2:
        return {"isValid": True, "message": "보통 강도의 비밀번호입니다.", "strength": "medium"}
    return {"isValid": True, "message": "강력한 비밀번호입니다.", "strength": "strong"}


def validate_ticket_count(count):
    if count is None or count == "":
        return _fail("수강권 회차를 입력해주세요.")
    value = _to_int(count)
    if value is None:
        return _fail("올바른 회차를 입력해주세요.")
    if not isinstance(value, int):
        return _fail("회차는 정수로 입력해주세요.")
    if value < 1:
        return _fail("회차는 최소 1회 이상이어야 합니다.")
    if value > 100:
        return _fail("회차는 최대 100회까지 입력 가능합니다.")
    return _ok()


def require_fields(data, *names):
    """Raise ValidationError naming the first missing field."""
    if not isinstance(data, dict):
        raise ValidationError("입력 데이터가 올바르지 않습니다")
    for name in names:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"필수 항목이 누락되었습니다: {name}")


def ensure_valid(result):
    """Raise ValidationError when a validate_* result is not valid."""
    if not result["isValid"]:
        raise ValidationError(result["message"])
    return result
