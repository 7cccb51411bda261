"""Settlement-period income/expense arithmetic."""
from datetime import date, timedelta

from Pianoacademy.core.formatters import clamp_day, parse_date, shift_month

DEFAULT_SETTLEMENT_DAY = 10

EXPENSE_CATEGORIES = {
    "INSTRUMENT": "악기 유지보수",
    "TEXTBOOK": "교재비",
    "FACILITY": "시설비",
    "UTILITY": "공과금",
    "MARKETING": "마케팅비",
    "SALARY": "인건비",
    "OTHER": "기타",
}


def get_settlement_period(settlement_day=DEFAULT_SETTLEMENT_DAY, today=None):
    """(start, end) of the settlement window containing ``today``.

    The settlement day is clamped to each month's length.
    today.day >= settlement_day: [this month's day, next month's day - 1]
    otherwise:                   [last month's day, this month's day - 1]
    """
    today = parse_date(today) if today is not None else date.today()
    if today.day >= clamp_day(today.year, today.month, settlement_day).day:
        start_month = (today.year, today.month)
    else:
        start_month = shift_month(today.year, today.month, -1)
    end_month = shift_month(start_month[0], start_month[1], 1)
    start = clamp_day(start_month[0], start_month[1], settlement_day)
    end = clamp_day(end_month[0], end_month[1], settlement_day) - timedelta(days=1)
    return start, end


def _in_period(value, period):
    d = parse_date(value)
    return d is not None and period[0] <= d <= period[1]


def calculate_monthly_income(payments, period) -> int:
    return sum(
        p.get("amount") or 0
        for p in payments or []
        if p.get("status") == "paid" and _in_period(p.get("paidDate") or p.get("date"), period)
    )


def calculate_total_expense(expenses, period) -> int:
    return sum(e.get("amount") or 0 for e in expenses or [] if _in_period(e.get("date"), period))


def calculate_net_income(income, expense) -> int:
    return abs(income - expense)


def summarize_settlement(payments, expenses, settlement_day=DEFAULT_SETTLEMENT_DAY, today=None):
    period = get_settlement_period(settlement_day, today)
    income = calculate_monthly_income(payments, period)
    expense = calculate_total_expense(expenses, period)
    return {
        "startDate": period[0].isoformat(),
        "endDate": period[1].isoformat(),
        "monthlyIncome": income,
        "totalExpense": expense,
        "netIncome": calculate_net_income(income, expense),
        "isProfit": income >= expense,
    }


def get_monthly_expense_stats(expenses, year, month):
    selected = []
    for e in expenses or []:
        d = parse_date(e.get("date"))
        if d and d.year == year and d.month == month:
            selected.append(e)
    category_stats = {}
    for e in selected:
        category = e.get("category") or "OTHER"
        category_stats[category] = category_stats.get(category, 0) + (e.get("amount") or 0)
    return {
        "expenses": selected,
        "totalAmount": sum(e.get("amount") or 0 for e in selected),
        "count": len(selected),
        "categoryStats": category_stats,
    }
