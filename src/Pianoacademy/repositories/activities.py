"""Activity log. Append-only: there is no update or delete."""
from Pianoacademy.core.formatters import format_date
from Pianoacademy.repositories.base import (
    ApiRepository,
    FirebaseRepository,
    MockRepository,
    in_date_range,
    matches,
    now_iso,
    sort_desc,
)

RECENT_LIMIT = 10


class ActivityRules:
    name = "ActivityRepository"
    collection_name = "activities"
    group = "activities"
    required_fields = ("type",)

    def get_recent(self, limit=RECENT_LIMIT):
        self._log("get_recent", limit)
        return self.get_all(limit=limit)

    def get_by_student(self, student_id):
        self._log("get_by_student", student_id)
        return self.get_all(student_id=student_id)

    def get_by_type(self, type):
        self._log("get_by_type", type)
        return self.get_all(type=type)


class MockActivityRepository(ActivityRules, MockRepository):

    def get_all(self, type=None, student_id=None, limit=None):
        self._log("get_all", type, student_id, limit)
        self._delay()
        items = sort_desc(self._list(lambda a: matches(a, {"type": type, "studentId": student_id})), "timestamp")
        return items[:limit] if limit else items

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        self._delay()
        return self._insert(data, front=True, timestamp=now_iso())

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        self._delay()
        return sort_desc(self._list(lambda a: in_date_range(a.get("timestamp"), start, end)), "timestamp")


class ApiActivityRepository(ActivityRules, ApiRepository):

    def get_all(self, type=None, student_id=None, limit=None):
        self._log("get_all", type, student_id, limit)
        params = self._params({"type": type, "studentId": student_id, "limit": limit})
        return self._call("get_all", self.client.get, self._path("list"), params=params)

    def get_recent(self, limit=RECENT_LIMIT):
        self._log("get_recent", limit)
        return self._call("get_recent", self.client.get, self._path("recent"), params={"limit": limit})

    def get_by_type(self, type):
        self._log("get_by_type", type)
        return self._call("get_by_type", self.client.get, self._path("by_type", type=type))

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        return self._call("create", self.client.post, self._path("create"), json=data)

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        params = {"startDate": format_date(start), "endDate": format_date(end)}
        return self._call("get_by_date_range", self.client.get, self._path("list"), params=params)


class FirebaseActivityRepository(ActivityRules, FirebaseRepository):

    def get_all(self, type=None, student_id=None, limit=None):
        self._log("get_all", type, student_id, limit)
        return self._data("get_all", self.remote.get_activities(
            self._teacher_id(), type=type, student_id=student_id, limit=limit))

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        teacher_id = self._teacher_id()
        result = self._unwrap("create", self.remote.add_activity(data, teacher_id))
        return {**data, "id": result["id"], "teacherId": teacher_id, "timestamp": now_iso()}

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        return self._data("get_by_date_range", self.remote.get_activities_by_date_range(
            self._teacher_id(), format_date(start), format_date(end)))
