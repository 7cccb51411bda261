import re
import math
import calendar
from datetime import date, datetime

_DATE_RE = re.compile(r"^(\d{4})[-./](\d{1,2})[-./](\d{1,2})$")


def round_half_up(value) -> int:
    return int(math.floor(value + 0.5))


def parse_date(value):
    """Return a ``date`` for date/datetime objects and common string forms.

    Accepts ``YYYY-MM-DD``, ``YYYY.MM.DD``, ``YYYY/MM/DD`` and ISO datetimes.
    Returns None when the value cannot be read as a date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    m = _DATE_RE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value, sep="-"):
    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.year:04d}{sep}{d.month:02d}{sep}{d.day:02d}"


def month_key(value) -> str:
    d = parse_date(value)
    return f"{d.year:04d}-{d.month:02d}" if d else ""


def shift_month(year, month, delta):
    """(year, month) moved by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def clamp_day(year, month, day) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def format_won(amount, include_unit=True) -> str:
    if amount is None:
        amount = 0
    try:
        formatted = f"{int(round(float(amount))):,}"
    except (TypeError, ValueError):
        formatted = "0"
    return f"{formatted}원" if include_unit else formatted


def format_phone(phone) -> str:
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return phone or ""


def format_percent(value, decimals=0) -> str:
    if value is None:
        return "0%"
    percent = value * 100 if value <= 1 else value
    return f"{percent:.{decimals}f}%"
