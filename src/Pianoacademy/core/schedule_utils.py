from datetime import timedelta

from Pianoacademy.core.formatters import parse_date

DAY_NAMES = ["일", "월", "화", "수", "목", "금", "토"]
TIME_UNSET = "시간 미정"
SCHEDULE_UNSET = "일정 미정"


def day_name(value) -> str:
    d = parse_date(value)
    # date.weekday(): Monday=0, DAY_NAMES starts on Sunday
    return DAY_NAMES[(d.weekday() + 1) % 7]


def parse_schedule(schedule):
    """``"월/수 14:00"`` -> (["월", "수"], "14:00"). Missing time gives TIME_UNSET."""
    if not schedule or not schedule.strip():
        return [], TIME_UNSET
    parts = schedule.split()
    days = [d for d in parts[0].split("/") if d]
    time = parts[1] if len(parts) > 1 else TIME_UNSET
    return days, time


def _time_sort_key(entry):
    return (entry["time"] == TIME_UNSET, entry["time"])


def schedules_for_date(students, value):
    day = day_name(value)
    schedules = []
    for student in students or []:
        days, time = parse_schedule(student.get("schedule"))
        if day in days:
            schedules.append({
                "studentId": student.get("id"),
                "studentName": student.get("name"),
                "time": time,
                "day": day,
                "level": student.get("level"),
                "book": student.get("book"),
                "fullSchedule": student.get("schedule"),
            })
    schedules.sort(key=_time_sort_key)
    return schedules


def weekly_schedules(students, start_date):
    start = parse_date(start_date)
    week = []
    for offset in range(7):
        d = start + timedelta(days=offset)
        week.append({
            "date": d.isoformat(),
            "day": day_name(d),
            "schedules": schedules_for_date(students, d),
        })
    return week


def upcoming_class_dates(schedule, today, count=2):
    """Next ``count`` class days on or after ``today`` for one weekly schedule."""
    days, time = parse_schedule(schedule)
    if not days:
        return []
    start = parse_date(today)
    classes = []
    for offset in range(14):
        d = start + timedelta(days=offset)
        if day_name(d) in days:
            classes.append({
                "date": d.isoformat(),
                "day": day_name(d),
                "time": time,
                "isPrimary": not classes,
            })
            if len(classes) == count:
                break
    return classes
