from datetime import date, timedelta

from Pianoacademy.core.formatters import parse_date, round_half_up, shift_month

STATUS_LABELS = {
    "present": "출석",
    "absent": "결석",
    "late": "지각",
    "makeup": "보강",
}
ATTENDED = ("present", "makeup")


def calculate_attendance_rate(records) -> int:
    """round(100 * (present + makeup) / total); 0 for no records."""
    if not records:
        return 0
    attended = sum(1 for r in records if r.get("status") in ATTENDED)
    return round_half_up(attended / len(records) * 100)


def _stats(records):
    stats = {
        "total": len(records),
        "present": 0,
        "absent": 0,
        "late": 0,
        "makeup": 0,
    }
    for r in records:
        status = r.get("status")
        if status in STATUS_LABELS:
            stats[status] += 1
    stats["rate"] = calculate_attendance_rate(records)
    return stats


def get_monthly_stats(records, year, month):
    selected = []
    for r in records or []:
        d = parse_date(r.get("date"))
        if d and d.year == year and d.month == month:
            selected.append(r)
    return _stats(selected)


def get_weekly_stats(records, week_start):
    start = parse_date(week_start)
    end = start + timedelta(days=6)
    selected = []
    for r in records or []:
        d = parse_date(r.get("date"))
        if d and start <= d <= end:
            selected.append(r)
    return _stats(selected)


def _by_date(records):
    return sorted(records or [], key=lambda r: parse_date(r.get("date")) or date.min)


def get_consecutive_attendance(records) -> int:
    """Attended classes counted back from the latest record.

    Late does not count but does not break the streak; an absence does.
    """
    consecutive = 0
    for r in reversed(_by_date(records)):
        status = r.get("status")
        if status in ATTENDED:
            consecutive += 1
        elif status == "absent":
            break
    return consecutive


def get_consecutive_absences(records) -> int:
    consecutive = 0
    for r in reversed(_by_date(records)):
        if r.get("status") != "absent":
            break
        consecutive += 1
    return consecutive


def get_attendance_grade(rate) -> str:
    if rate >= 95:
        return "S"
    if rate >= 85:
        return "A"
    if rate >= 75:
        return "B"
    if rate >= 65:
        return "C"
    return "D"


def get_attendance_trend(records, months=6, today=None):
    """Monthly rates for the last ``months`` months, oldest first."""
    if not records:
        return []
    today = today or date.today()
    trend = []
    for i in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -i)
        stats = get_monthly_stats(records, year, month)
        trend.append({
            "year": year,
            "month": month,
            "rate": stats["rate"],
            "total": stats["total"],
            "present": stats["present"],
        })
    return trend


def get_attendance_status_label(status) -> str:
    return STATUS_LABELS.get(status, "-")
