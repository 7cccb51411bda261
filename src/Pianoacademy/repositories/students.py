from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
)


class StudentRules:
    name = "StudentRepository"
    collection_name = "students"
    group = "students"
    not_found_message = "학생을 찾을 수 없습니다"
    required_fields = ("name",)

    def get_by_category(self, category):
        self._log("get_by_category", category)
        return [s for s in self.get_all() if s.get("category") == category]

    def get_unpaid_students(self):
        self._log("get_unpaid_students")
        return [s for s in self.get_all() if s.get("unpaid")]

    def search(self, query):
        self._log("search", query)
        needle = (query or "").strip().lower()
        if not needle:
            return self.get_all()
        return [s for s in self.get_all() if needle in (s.get("name") or "").lower()]


class MockStudentRepository(StudentRules, MockCrudRepository):
    pass


class ApiStudentRepository(StudentRules, ApiCrudRepository):

    def get_by_category(self, category):
        self._log("get_by_category", category)
        return self._call("get_by_category", self.client.get, self._path("list"), params={"category": category})

    def get_unpaid_students(self):
        self._log("get_unpaid_students")
        return self._call("get_unpaid_students", self.client.get, self._path("list"), params={"unpaid": "true"})

    def search(self, query):
        self._log("search", query)
        return self._call("search", self.client.get, self._path("list"), params={"search": query})


class FirebaseStudentRepository(StudentRules, FirebaseCrudRepository):

    def _remote_list(self, teacher_id, limit=None, **filters):
        result = self.remote.get_all_students(teacher_id, limit=limit)
        if result.get("success") and filters:
            result["data"] = [s for s in result["data"] if all(s.get(k) == v for k, v in filters.items())]
        return result

    def _remote_get(self, item_id):
        return self.remote.get_student_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.add_student(data, teacher_id)

    def _remote_update(self, item_id, partial):
        return self.remote.update_student(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_student(item_id)

    def subscribe(self, callback):
        return self.remote.subscribe_to_students(self._teacher_id(), callback)
