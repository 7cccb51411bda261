from Pianoacademy.core.formatters import format_date
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    in_date_range,
    sort_desc,
)


class LessonNoteRules:
    name = "LessonNoteRepository"
    collection_name = "lesson_notes"
    group = "lesson_notes"
    not_found_message = "수업 기록을 찾을 수 없습니다"
    required_fields = ("studentId", "date")

    def _new_note(self, data):
        note = {"isPublic": True, **data}
        note["date"] = format_date(note["date"])
        return note

    def get_public_by_student_id(self, student_id):
        """Parent view: only notes marked ``isPublic``."""
        return [n for n in self.get_by_student_id(student_id) if n.get("isPublic")]


class MockLessonNoteRepository(LessonNoteRules, MockCrudRepository):
    insert_front = True

    def get_all(self, student_id=None, start_date=None, end_date=None, limit=None):
        self._log("get_all", student_id, start_date, end_date, limit)
        self._delay()

        def wanted(note):
            if student_id and note.get("studentId") != student_id:
                return False
            if start_date and end_date and not in_date_range(note.get("date"), start_date, end_date):
                return False
            return True

        notes = sort_desc(self._list(wanted), "date")
        return notes[:limit] if limit else notes

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_note(data))

    def get_by_student_id(self, student_id, **options):
        self._log("get_by_student_id", student_id)
        return self.get_all(student_id=student_id, **options)


class ApiLessonNoteRepository(LessonNoteRules, ApiCrudRepository):

    def get_all(self, student_id=None, start_date=None, end_date=None, limit=None):
        self._log("get_all", student_id, start_date, end_date, limit)
        params = self._params({
            "studentId": student_id,
            "startDate": format_date(start_date) if start_date else None,
            "endDate": format_date(end_date) if end_date else None,
            "limit": limit,
        })
        return self._call("get_all", self.client.get, self._path("list"), params=params)

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_note(data))

    def get_by_student_id(self, student_id, **options):
        self._log("get_by_student_id", student_id)
        return self._call("get_by_student_id", self.client.get,
                          self._path("by_student", student_id=student_id), params=self._params(options))


class FirebaseLessonNoteRepository(LessonNoteRules, FirebaseCrudRepository):
    """Every call is scoped to the signed-in teacher."""

    def _remote_list(self, teacher_id, student_id=None, start_date=None, end_date=None, limit=None):
        return self.remote.get_lesson_notes(
            teacher_id,
            student_id=student_id,
            start_date=format_date(start_date) if start_date else None,
            end_date=format_date(end_date) if end_date else None,
            limit=limit,
        )

    def _remote_get(self, item_id):
        return self.remote.get_lesson_note_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.save_lesson_note(data, teacher_id)

    def _remote_update(self, item_id, partial):
        self._teacher_id()
        return self.remote.update_lesson_note(item_id, partial)

    def _remote_delete(self, item_id):
        self._teacher_id()
        return self.remote.delete_lesson_note(item_id)

    def _prepare_new(self, data):
        return self._new_note(data)

    def get_by_student_id(self, student_id, **options):
        self._log("get_by_student_id", student_id)
        return self.get_all(student_id=student_id, **options)

    def get_public_by_student_id(self, student_id):
        self._log("get_public_by_student_id", student_id)
        return self._data("get_public_by_student_id",
                          self.remote.get_lesson_notes_by_student(student_id, public_only=True))
