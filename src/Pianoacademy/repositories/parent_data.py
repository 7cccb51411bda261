"""
Read-only views for the parent app: one child's dashboard, attendance
calendar, tuition history, gallery and growth timeline.
"""
import copy
from datetime import date

from Pianoacademy.core.attendance_utils import calculate_attendance_rate, get_consecutive_attendance
from Pianoacademy.core.formatters import format_date, parse_date
from Pianoacademy.core.schedule_utils import day_name, parse_schedule, upcoming_class_dates, TIME_UNSET
from Pianoacademy.repositories.base import (
    ApiRepository,
    FirebaseRepository,
    MockRepository,
    sort_desc,
)
from Pianoacademy.repositories.notices import reader_view
from Pianoacademy.services.endpoints import endpoint

RECENT_ACTIVITY_LIMIT = 5


def _in_month(record, year, month):
    d = parse_date(record.get("date"))
    return d is not None and d.year == year and d.month == month


def _day_key(year, month, day):
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


class ParentDataRules:
    name = "ParentDataRepository"
    not_found_message = "자녀 정보를 찾을 수 없습니다"


class MockParentDataRepository(ParentDataRules, MockRepository):
    """Serves the seeded parent fixtures (child "1")."""

    def _fixture(self, method, attr, *args):
        self._log(method, *args)
        self._delay()
        return copy.deepcopy(getattr(self.dataset, attr))

    def get_child_data(self, child_id):
        return self._fixture("get_child_data", "child_data", child_id)

    def get_recent_activities(self, child_id):
        return self._fixture("get_recent_activities", "parent_recent_activities", child_id)

    def get_today_schedule(self, child_id):
        return self._fixture("get_today_schedule", "today_schedule", child_id)

    def get_completed_songs(self, child_id):
        return self._fixture("get_completed_songs", "completed_songs", child_id)

    def get_weekly_tasks(self, child_id):
        return self._fixture("get_weekly_tasks", "weekly_tasks", child_id)

    def get_attendance_records(self, child_id, year=None, month=None):
        records = self._fixture("get_attendance_records", "child_attendance", child_id, year, month)
        if year and month:
            return [r for r in records if _in_month(r, year, month)]
        return records

    def get_attendance_status(self, child_id, year, month, day):
        key = _day_key(year, month, day)
        records = self._fixture("get_attendance_status", "child_attendance", child_id, key)
        return next((r["status"] for r in records if format_date(r.get("date")) == key), None)

    def get_upcoming_classes(self, child_id):
        return self._fixture("get_upcoming_classes", "upcoming_classes", child_id)

    def get_payment_history(self, child_id):
        return self._fixture("get_payment_history", "payment_history", child_id)

    def get_ticket_prices(self, child_id=None):
        return self._fixture("get_ticket_prices", "ticket_prices")

    def get_gallery_items(self, child_id):
        items = self._fixture("get_gallery_items", "gallery", child_id)
        return [item for item in items if item.get("studentId") in (None, child_id)]

    def get_timeline(self, child_id):
        return self._fixture("get_timeline", "timeline", child_id)

    def get_achievements(self, child_id):
        return self._fixture("get_achievements", "achievements", child_id)

    def get_notices(self, child_id):
        notices = self._fixture("get_notices", "notices", child_id)
        notices = [n for n in notices if child_id in (n.get("recipients") or [])]
        return [reader_view(n, child_id) for n in sort_desc(notices, "createdAt")]

    def get_lesson_notes(self, child_id):
        notes = self._fixture("get_lesson_notes", "lesson_notes", child_id)
        notes = [n for n in notes if n.get("studentId") == child_id and n.get("isPublic")]
        return sort_desc(notes, "date")


class ApiParentDataRepository(ParentDataRules, ApiRepository):
    group = "parent"

    def _get(self, method, path, params=None):
        return self._call(method, self.client.get, path, params=params)

    def get_child_data(self, child_id):
        self._log("get_child_data", child_id)
        dashboard = self._get("get_child_data", endpoint("dashboard", "parent", child_id=child_id))
        return (dashboard or {}).get("child")

    def get_recent_activities(self, child_id):
        self._log("get_recent_activities", child_id)
        return self._get("get_recent_activities", self._path("recent_activities", child_id=child_id))

    def get_today_schedule(self, child_id):
        self._log("get_today_schedule", child_id)
        return self._get("get_today_schedule", self._path("today_schedule", child_id=child_id))

    def get_completed_songs(self, child_id):
        self._log("get_completed_songs", child_id)
        return self._get("get_completed_songs", endpoint("progress", "songs", student_id=child_id))

    def get_weekly_tasks(self, child_id):
        self._log("get_weekly_tasks", child_id)
        return self._get("get_weekly_tasks", self._path("weekly_tasks", child_id=child_id))

    def get_attendance_records(self, child_id, year=None, month=None):
        self._log("get_attendance_records", child_id, year, month)
        return self._get("get_attendance_records", endpoint("attendance", "by_student", student_id=child_id),
                         params=self._params({"year": year, "month": month}))

    def get_attendance_status(self, child_id, year, month, day):
        self._log("get_attendance_status", child_id, year, month, day)
        result = self._get("get_attendance_status", endpoint("attendance", "by_date", date=_day_key(year, month, day)),
                           params={"studentId": child_id})
        return (result or {}).get("status")

    def get_upcoming_classes(self, child_id):
        self._log("get_upcoming_classes", child_id)
        return self._get("get_upcoming_classes", self._path("upcoming_classes", child_id=child_id))

    def get_payment_history(self, child_id):
        self._log("get_payment_history", child_id)
        return self._get("get_payment_history", endpoint("payments", "by_student", student_id=child_id))

    def get_ticket_prices(self, child_id=None):
        self._log("get_ticket_prices")
        return self._get("get_ticket_prices", self._path("ticket_prices"))

    def get_gallery_items(self, child_id):
        self._log("get_gallery_items", child_id)
        return self._get("get_gallery_items", self._path("gallery", child_id=child_id))

    def get_timeline(self, child_id):
        self._log("get_timeline", child_id)
        return self._get("get_timeline", self._path("timeline", child_id=child_id))

    def get_achievements(self, child_id):
        self._log("get_achievements", child_id)
        return self._get("get_achievements", self._path("achievements", child_id=child_id))

    def get_notices(self, child_id):
        self._log("get_notices", child_id)
        return self._get("get_notices", endpoint("notices", "by_student", student_id=child_id))

    def get_lesson_notes(self, child_id):
        self._log("get_lesson_notes", child_id)
        notes = self._get("get_lesson_notes", endpoint("lesson_notes", "by_student", student_id=child_id))
        return [n for n in notes or [] if n.get("isPublic")]


class FirebaseParentDataRepository(ParentDataRules, FirebaseRepository):
    """Derives the parent views from the child's student document and
    the shared collections. Songs, tasks, timeline and achievements are
    arrays kept on the student document; ticket prices live on the
    teacher's profile.
    """

    def __init__(self, config, remote, current_user=None, today=None):
        super().__init__(config, remote, current_user)
        self.today = today or date.today

    def _student(self, method, child_id):
        return self._data(method, self.remote.get_student_by_id(child_id))

    def _records(self, method, child_id):
        return self._data(method, self.remote.get_attendance_by_student_id(child_id)) or []

    def get_child_data(self, child_id):
        self._log("get_child_data", child_id)
        student = self._student("get_child_data", child_id)
        records = self._records("get_child_data", child_id)
        attended = [r for r in records if r.get("status") in ("present", "makeup")]
        return {
            **student,
            "attendanceRate": f"{calculate_attendance_rate(records)}%",
            "totalAttendance": len(attended),
            "consecutiveAttendance": get_consecutive_attendance(records),
        }

    def get_recent_activities(self, child_id):
        self._log("get_recent_activities", child_id)
        notices = self._data("get_recent_activities", self.remote.get_notices_for_student(child_id)) or []
        activities = [
            {
                "id": n.get("id"),
                "type": "notice",
                "title": n.get("title"),
                "content": n.get("content"),
                "date": n.get("date") or n.get("createdAt"),
                "isNew": not n.get("isRead"),
            }
            for n in notices
        ]
        return activities[:RECENT_ACTIVITY_LIMIT]

    def get_today_schedule(self, child_id):
        self._log("get_today_schedule", child_id)
        student = self._student("get_today_schedule", child_id)
        days, time = parse_schedule(student.get("schedule"))
        has_class = day_name(self.today()) in days
        return {
            "hasClass": has_class,
            "classTime": time if has_class and time != TIME_UNSET else None,
            "homework": student.get("homework"),
        }

    def _student_list(self, method, child_id, field):
        self._log(method, child_id)
        return self._student(method, child_id).get(field) or []

    def get_completed_songs(self, child_id):
        return sort_desc(self._student_list("get_completed_songs", child_id, "completedSongs"), "date")

    def get_weekly_tasks(self, child_id):
        return self._student_list("get_weekly_tasks", child_id, "weeklyTasks")

    def get_timeline(self, child_id):
        return sort_desc(self._student_list("get_timeline", child_id, "timeline"), "date")

    def get_achievements(self, child_id):
        return self._student_list("get_achievements", child_id, "achievements")

    def get_attendance_records(self, child_id, year=None, month=None):
        self._log("get_attendance_records", child_id, year, month)
        records = self._records("get_attendance_records", child_id)
        if year and month:
            return [r for r in records if _in_month(r, year, month)]
        return records

    def get_attendance_status(self, child_id, year, month, day):
        self._log("get_attendance_status", child_id, year, month, day)
        key = _day_key(year, month, day)
        records = self._records("get_attendance_status", child_id)
        return next((r.get("status") for r in records if format_date(r.get("date")) == key), None)

    def get_upcoming_classes(self, child_id):
        self._log("get_upcoming_classes", child_id)
        student = self._student("get_upcoming_classes", child_id)
        return upcoming_class_dates(student.get("schedule"), self.today())

    def get_payment_history(self, child_id):
        self._log("get_payment_history", child_id)
        return self._data("get_payment_history", self.remote.get_tuition_by_student_id(child_id))

    def get_ticket_prices(self, child_id=None):
        self._log("get_ticket_prices", child_id)
        if child_id:
            teacher_id = self._student("get_ticket_prices", child_id).get("teacherId")
        else:
            teacher_id = self._teacher_id()
        if not teacher_id:
            return []
        profile = self._data("get_ticket_prices", self.remote.get_user(teacher_id)) or {}
        return profile.get("ticketPrices") or []

    def get_gallery_items(self, child_id):
        self._log("get_gallery_items", child_id)
        return self._data("get_gallery_items", self.remote.get_gallery_items_for_student(child_id))

    def get_notices(self, child_id):
        self._log("get_notices", child_id)
        return self._data("get_notices", self.remote.get_notices_for_student(child_id))

    def get_lesson_notes(self, child_id):
        self._log("get_lesson_notes", child_id)
        return self._data("get_lesson_notes", self.remote.get_lesson_notes_by_student(child_id, public_only=True))
