import calendar
from datetime import date

from Pianoacademy.core.formatters import format_date
from Pianoacademy.errors import ValidationError
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    in_date_range,
    sort_desc,
)

STATUSES = ("present", "absent", "late", "makeup")


class AttendanceRules:
    name = "AttendanceRepository"
    collection_name = "attendance"
    group = "attendance"
    not_found_message = "출석 기록을 찾을 수 없습니다"
    required_fields = ("studentId", "date", "status")

    def validate_new(self, data):
        super().validate_new(data)
        if data.get("status") not in STATUSES:
            raise ValidationError(f"알 수 없는 출석 상태입니다: {data.get('status')}")


class MockAttendanceRepository(AttendanceRules, MockCrudRepository):

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        self._delay()
        return self._list(lambda r: r.get("studentId") == student_id)

    def get_by_date(self, day):
        self._log("get_by_date", day)
        self._delay()
        target = format_date(day)
        return self._list(lambda r: format_date(r.get("date")) == target)

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        self._delay()
        return self._list(lambda r: in_date_range(r.get("date"), start, end))


class ApiAttendanceRepository(AttendanceRules, ApiCrudRepository):

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._call("get_by_student_id", self.client.get, self._path("by_student", student_id=student_id))

    def get_by_date(self, day):
        self._log("get_by_date", day)
        return self._call("get_by_date", self.client.get, self._path("by_date", date=format_date(day)))

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        params = {"startDate": format_date(start), "endDate": format_date(end)}
        return self._call("get_by_date_range", self.client.get, self._path("list"), params=params)


class FirebaseAttendanceRepository(AttendanceRules, FirebaseCrudRepository):

    def __init__(self, config, remote, current_user=None, today=None):
        super().__init__(config, remote, current_user)
        self.today = today or date.today

    def _remote_list(self, teacher_id, start_date=None, end_date=None, **filters):
        # no unbounded scan: default to the current month
        if not (start_date and end_date):
            today = self.today()
            start_date = today.replace(day=1)
            end_date = today.replace(day=calendar.monthrange(today.year, today.month)[1])
        result = self.remote.get_attendance_by_range(teacher_id, format_date(start_date), format_date(end_date))
        if result.get("success") and filters:
            result["data"] = [r for r in result["data"] if all(r.get(k) == v for k, v in filters.items())]
        return result

    def _remote_get(self, item_id):
        return self.remote.get_attendance_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.save_attendance(data, teacher_id)

    def _remote_update(self, item_id, partial):
        return self.remote.update_attendance(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_attendance(item_id)

    def _prepare_new(self, data):
        return {**data, "date": format_date(data["date"])}

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._data("get_by_student_id", self.remote.get_attendance_by_student_id(student_id))

    def get_by_date(self, day):
        self._log("get_by_date", day)
        return self._data("get_by_date", self.remote.get_attendance_by_date(self._teacher_id(), format_date(day)))

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        records = self._data("get_by_date_range", self.remote.get_attendance_by_range(
            self._teacher_id(), format_date(start), format_date(end)))
        return sort_desc(records, "date")
