import pytest

from Pianoacademy.core import validators
from Pianoacademy.errors import ValidationError


def test_name_rules():
    assert validators.validate_name("김지우")["isValid"]
    assert validators.validate_name("김")["message"] == "이름은 최소 2자 이상이어야 합니다."
    assert not validators.validate_name("Kim")["isValid"]
    assert not validators.validate_name("   ")["isValid"]


def test_phone_and_email():
    assert validators.validate_phone("010-1234-5678")["isValid"]
    assert not validators.validate_phone("02-123-4567")["isValid"]
    assert validators.validate_email("a@b.co")["isValid"]
    assert not validators.validate_email("a@b")["isValid"]


@pytest.mark.parametrize("amount, valid", [
    (280000, True),
    ("150,000", True),
    (0, False),
    (-1, False),
    (10.5, False),
    ("abc", False),
    (100_000_001, False),
])
def test_amount(amount, valid):
    assert validators.validate_amount(amount)["isValid"] is valid


def test_password_strength():
    assert validators.validate_password("short")["strength"] == "weak"
    assert validators.validate_password("abcdefgh")["isValid"] is False
    assert validators.validate_password("abcdefg1")["strength"] == "medium"
    assert validators.validate_password("Abcdefg1!")["strength"] == "strong"


def test_ticket_count_bounds():
    assert validators.validate_ticket_count(1)["isValid"]
    assert not validators.validate_ticket_count(0)["isValid"]
    assert not validators.validate_ticket_count(101)["isValid"]


def test_require_fields_names_missing_field():
    validators.require_fields({"name": "김지우"}, "name")
    with pytest.raises(ValidationError) as info:
        validators.require_fields({"name": " "}, "name")
    assert "name" in str(info.value)
    with pytest.raises(ValidationError):
        validators.require_fields(None, "name")


def test_ensure_valid_raises_with_message():
    with pytest.raises(ValidationError) as info:
        validators.ensure_valid(validators.validate_date("2025-13-40"))
    assert str(info.value) == "올바른 날짜 형식이 아닙니다."
