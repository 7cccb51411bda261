import math
from datetime import date

from Pianoacademy.core.formatters import parse_date, round_half_up

PRORATION_BASE_DAYS = 30


def _today(today):
    return parse_date(today) if today is not None else date.today()


def get_days_between(start, end) -> int:
    """Inclusive day count between two dates."""
    return (parse_date(end) - parse_date(start)).days + 1


def get_days_until_expiry(end_date, today=None) -> int:
    """max(0, ceil((end - today) / 1 day)), both at midnight."""
    end = parse_date(end_date)
    if end is None:
        return 0
    return max(0, math.ceil((end - _today(today)).days))


def ticket_end_date(ticket):
    return ticket.get("endDate") or (ticket.get("ticketPeriod") or {}).get("end")


def get_ticket_status(ticket, today=None):
    if not ticket:
        return {"status": "expired", "message": "수강권 없음"}

    ticket_type = ticket.get("ticketType")
    if ticket_type == "count":
        count = ticket.get("ticketCount") or 0
        if count <= 0:
            return {"status": "expired", "message": "수강권 만료"}
        if count == 1:
            return {"status": "critical", "message": "1회 남음"}
        if count <= 2:
            return {"status": "warning", "message": f"{count}회 남음"}
        return {"status": "normal", "message": f"{count}회 남음"}

    if ticket_type == "period":
        days_left = get_days_until_expiry(ticket_end_date(ticket), today)
        if days_left == 0:
            return {"status": "expired", "message": "수강권 만료"}
        if days_left <= 3:
            return {"status": "critical", "message": f"D-{days_left}"}
        if days_left <= 7:
            return {"status": "warning", "message": f"D-{days_left}"}
        return {"status": "normal", "message": f"D-{days_left}"}

    return {"status": "normal", "message": "-"}


def calculate_proration(start_date, end_date, total_amount) -> int:
    days = get_days_between(start_date, end_date)
    return round_half_up(total_amount * days / PRORATION_BASE_DAYS)


def get_ticket_progress(used, total) -> int:
    if not total:
        return 0
    return min(100, max(0, round_half_up(used / total * 100)))


def get_period_progress(start_date, end_date, today=None) -> int:
    start, end = parse_date(start_date), parse_date(end_date)
    total_days = (end - start).days + 1
    if total_days <= 0:
        return 0
    days_used = (_today(today) - start).days + 1
    return min(100, max(0, round_half_up(days_used / total_days * 100)))


def calculate_price_per_class(total_amount, sessions) -> int:
    if not sessions:
        return 0
    return round_half_up(total_amount / sessions)


def calculate_discount(original_price, discount_percent):
    discount_amount = round_half_up(original_price * discount_percent / 100)
    return {
        "discountedPrice": original_price - discount_amount,
        "discountAmount": discount_amount,
    }
