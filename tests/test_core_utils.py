from datetime import date

import pytest

from Pianoacademy.core import attendance_utils, finance, formatters, payment_utils

TODAY = date(2025, 1, 20)


def _records(*statuses):
    return [{"date": f"2025-01-{i + 1:02d}", "status": s} for i, s in enumerate(statuses)]


def test_attendance_rate_counts_present_and_makeup():
    records = _records(*(["present"] * 7 + ["makeup", "late", "absent"]))
    assert attendance_utils.calculate_attendance_rate(records) == 80
    assert attendance_utils.calculate_attendance_rate([]) == 0


def test_rate_rounds_half_up():
    # 5 / 8 = 62.5
    records = _records(*(["present"] * 5 + ["absent"] * 3))
    assert attendance_utils.calculate_attendance_rate(records) == 63


def test_consecutive_attendance_skips_late_and_stops_at_absence():
    records = _records("present", "absent", "present", "late", "makeup")
    assert attendance_utils.get_consecutive_attendance(records) == 2
    assert attendance_utils.get_consecutive_absences(_records("present", "absent", "absent")) == 2


def test_monthly_and_weekly_stats():
    records = _records("present", "absent", "late") + [{"date": "2025-02-01", "status": "present"}]
    stats = attendance_utils.get_monthly_stats(records, 2025, 1)
    assert stats["total"] == 3
    assert stats["absent"] == 1
    assert attendance_utils.get_weekly_stats(records, "2025-01-02")["total"] == 2


def test_attendance_grade_and_trend():
    assert attendance_utils.get_attendance_grade(95) == "S"
    assert attendance_utils.get_attendance_grade(64) == "D"
    trend = attendance_utils.get_attendance_trend(_records("present"), months=3, today=TODAY)
    assert [(t["year"], t["month"]) for t in trend] == [(2024, 11), (2024, 12), (2025, 1)]
    assert trend[-1]["rate"] == 100


def test_count_ticket_status():
    status = payment_utils.get_ticket_status
    assert status({"ticketType": "count", "ticketCount": 1})["status"] == "critical"
    assert status({"ticketType": "count", "ticketCount": 0})["status"] == "expired"
    assert status({"ticketType": "count", "ticketCount": 2})["status"] == "warning"
    assert status({"ticketType": "count", "ticketCount": 5})["status"] == "normal"
    assert status(None)["status"] == "expired"


def test_period_ticket_status():
    def ticket(end):
        return {"ticketType": "period", "ticketPeriod": {"start": "2025-01-01", "end": end}}

    status = payment_utils.get_ticket_status
    assert status(ticket("2025-01-20"), today=TODAY)["status"] == "expired"
    assert status(ticket("2025-01-23"), today=TODAY)["status"] == "critical"
    assert status(ticket("2025-01-27"), today=TODAY)["status"] == "warning"
    assert status(ticket("2025-02-20"), today=TODAY)["status"] == "normal"
    assert payment_utils.get_days_until_expiry("2025-01-10", today=TODAY) == 0


def test_payment_arithmetic():
    assert payment_utils.calculate_proration("2025-01-01", "2025-01-15", 300000) == 150000
    assert payment_utils.get_ticket_progress(1, 4) == 25
    assert payment_utils.calculate_price_per_class(280000, 8) == 35000
    assert payment_utils.calculate_discount(400000, 20) == {"discountedPrice": 320000, "discountAmount": 80000}


def test_settlement_period_examples():
    assert finance.get_settlement_period(10, date(2025, 1, 15)) == (date(2025, 1, 10), date(2025, 2, 9))
    assert finance.get_settlement_period(10, date(2025, 1, 5)) == (date(2024, 12, 10), date(2025, 1, 9))
    # day clamped to the month length
    assert finance.get_settlement_period(31, date(2025, 2, 27)) == (date(2025, 1, 31), date(2025, 2, 27))
    assert finance.get_settlement_period(31, date(2025, 2, 28)) == (date(2025, 2, 28), date(2025, 3, 30))


@pytest.mark.parametrize("settlement_day", [1, 10, 28, 29, 30, 31])
@pytest.mark.parametrize("today", [
    date(2025, 2, 28), date(2024, 2, 29), date(2025, 4, 30), date(2025, 12, 31), date(2025, 1, 1),
])
def test_settlement_window_contains_today(settlement_day, today):
    start, end = finance.get_settlement_period(settlement_day, today)
    assert start <= today <= end


def test_settlement_summary():
    payments = [
        {"amount": 280000, "status": "paid", "date": "2025-01-12"},
        {"amount": 150000, "status": "unpaid", "date": "2025-01-13"},
        {"amount": 100000, "status": "paid", "date": "2025-01-05"},
    ]
    expenses = [{"amount": 300000, "date": "2025-01-11"}, {"amount": 5000, "date": "2025-02-10"}]
    summary = finance.summarize_settlement(payments, expenses, 10, date(2025, 1, 15))
    assert summary["monthlyIncome"] == 280000
    assert summary["totalExpense"] == 300000
    assert summary["netIncome"] == 20000
    assert summary["isProfit"] is False


def test_formatters():
    assert formatters.format_won(280000) == "280,000원"
    assert formatters.format_won(None) == "0원"
    assert formatters.parse_date("2025.01.05") == date(2025, 1, 5)
    assert formatters.parse_date("2025-01-05T10:00:00Z") == date(2025, 1, 5)
    assert formatters.parse_date("not a date") is None
    assert formatters.month_key("2025-03-09") == "2025-03"
    assert formatters.shift_month(2025, 1, -1) == (2024, 12)
    assert formatters.format_phone("01012345678") == "010-1234-5678"
