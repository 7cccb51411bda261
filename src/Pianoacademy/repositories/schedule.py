"""
Weekly lesson schedules and the parent-initiated schedule change requests.

Approving a request touches two records (the student's schedule and the
request itself). Firestore does both in one transaction; the mock and REST
backends write the student first and restore the previous schedule if
marking the request fails.
"""
import logging

from Pianoacademy.core.schedule_utils import parse_schedule, schedules_for_date, weekly_schedules
from Pianoacademy.errors import ValidationError
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseRepository,
    MockCrudRepository,
    now_iso,
    sort_desc,
)

logger = logging.getLogger(__name__)

ALREADY_HANDLED_MESSAGE = "이미 처리된 요청입니다"


def _owner_field(user_type):
    return "teacherId" if user_type == "teacher" else "parentId"


class ScheduleRules:
    name = "ScheduleRepository"
    collection_name = "schedule_requests"
    group = "schedule_requests"
    not_found_message = "일정 변경 요청을 찾을 수 없습니다"
    required_fields = ("studentId", "requestedSchedule")

    def _new_request(self, data):
        return {**data, "status": "pending", "rejectionReason": None}

    def _ensure_pending(self, request):
        if request.get("status") != "pending":
            raise ValidationError(ALREADY_HANDLED_MESSAGE)

    def create_request(self, data):
        self._log("create_request", data)
        self.validate_new(data)
        return self.create(self._new_request(data))

    def get_requests(self, user_id, user_type="teacher"):
        self._log("get_requests", user_id, user_type)
        return sort_desc(self.get_all(**{_owner_field(user_type): user_id}), "createdAt")

    def approve(self, request_id):
        self._log("approve", request_id)
        request = self.get_by_id(request_id)
        self._ensure_pending(request)

        student_id = request["studentId"]
        previous = self.students.get_by_id(student_id).get("schedule")
        self.students.update(student_id, {"schedule": request.get("requestedSchedule")})
        try:
            return self.update(request_id, {"status": "approved", "approvedAt": now_iso()})
        except Exception:
            logger.error("Approving request %s failed, restoring schedule of student %s", request_id, student_id)
            try:
                self.students.update(student_id, {"schedule": previous})
            except Exception as e:
                logger.error("Restoring schedule of student %s failed: %s", student_id, e)
            raise

    def reject(self, request_id, reason=""):
        self._log("reject", request_id, reason)
        request = self.get_by_id(request_id)
        self._ensure_pending(request)
        return self.update(request_id, {
            "status": "rejected",
            "rejectionReason": reason,
            "rejectedAt": now_iso(),
        })

    def get_schedules_by_date(self, day):
        self._log("get_schedules_by_date", day)
        return schedules_for_date(self.students.get_all(), day)

    def get_weekly_schedules(self, start_date):
        self._log("get_weekly_schedules", start_date)
        return weekly_schedules(self.students.get_all(), start_date)

    def get_student_schedule(self, student_id):
        self._log("get_student_schedule", student_id)
        student = self.students.get_by_id(student_id)
        days, time = parse_schedule(student.get("schedule"))
        return {
            "studentId": student_id,
            "schedule": student.get("schedule"),
            "days": days,
            "time": time,
        }


class MockScheduleRepository(ScheduleRules, MockCrudRepository):
    insert_front = True

    def __init__(self, config, dataset, students):
        super().__init__(config, dataset)
        self.students = students


class ApiScheduleRepository(ScheduleRules, ApiCrudRepository):

    def __init__(self, config, client, students):
        super().__init__(config, client)
        self.students = students

    def get_requests(self, user_id, user_type="teacher"):
        self._log("get_requests", user_id, user_type)
        params = {_owner_field(user_type): user_id}
        return self._call("get_requests", self.client.get, self._path("list"), params=params)


class FirebaseScheduleRepository(ScheduleRules, FirebaseRepository):

    def __init__(self, config, remote, students, current_user=None):
        super().__init__(config, remote, current_user)
        self.students = students

    def get_by_id(self, request_id):
        self._log("get_by_id", request_id)
        return self._data("get_by_id", self.remote.get_schedule_change_request_by_id(request_id))

    def create_request(self, data):
        self._log("create_request", data)
        self.validate_new(data)
        payload = dict(data)
        if not payload.get("teacherId"):
            payload["teacherId"] = self.students.get_by_id(payload["studentId"]).get("teacherId")
        result = self._unwrap("create_request", self.remote.create_schedule_change_request(payload))
        return {**self._new_request(payload), "id": result["id"]}

    def get_requests(self, user_id, user_type="teacher"):
        self._log("get_requests", user_id, user_type)
        return self._data("get_requests", self.remote.get_schedule_change_requests(user_id, user_type))

    def approve(self, request_id):
        self._log("approve", request_id)
        self._ensure_pending(self.get_by_id(request_id))
        return self._data("approve", self.remote.approve_schedule_change_request(request_id))

    def reject(self, request_id, reason=""):
        self._log("reject", request_id, reason)
        self._ensure_pending(self.get_by_id(request_id))
        self._unwrap("reject", self.remote.reject_schedule_change_request(request_id, reason))
        return self.get_by_id(request_id)
