import logging

from Pianoacademy.stores.base import EffectsMixin, FIVE_MINUTES, RealtimeMixin, Store
from Pianoacademy.stores.notification_store import STUDENT_ADDED

logger = logging.getLogger(__name__)


class StudentStore(RealtimeMixin, EffectsMixin, Store):
    """Student list cache (5 min) and the currently selected student."""

    name = "StudentStore"
    ttl = FIVE_MINUTES

    def __init__(self, repository, effects=None, notifications=None, current_user=None, clock=None):
        self.repository = repository
        self.effects = effects
        self.notifications = notifications
        self.current_user = current_user
        super().__init__(clock)

    def _reset_state(self):
        self.students = []
        self.selected_student = None

    def fetch_students(self, force_refresh=False):
        if not force_refresh and self.is_fresh():
            logger.debug("Using cached students data")
            return self.students

        def work():
            students = self.repository.get_all()
            self._set(students=students, last_fetched=self.now())
            return students
        return self._run_action("학생 목록을 불러오는데 실패했습니다.", work)

    def fetch_student_by_id(self, student_id):
        def work():
            student = self.repository.get_by_id(student_id)
            self._set(selected_student=student)
            return student
        return self._run_action("학생 정보를 불러오는데 실패했습니다.", work)

    def select_student(self, student_id):
        self._set(selected_student=next((s for s in self.students if s.get("id") == student_id), None))

    def clear_selected_student(self):
        self._set(selected_student=None)

    def add_student(self, student_data):
        def work():
            student = self.repository.create(student_data)
            self._set(students=self.students + [student], last_fetched=self.now())
            return student
        student = self._run_action("학생 추가에 실패했습니다.", work)
        self._notify_user({
            "type": STUDENT_ADDED,
            "title": "새 학생 등록",
            "message": f"{student_data.get('name')} 학생이 등록되었습니다",
            "targetId": student.get("id"),
        })
        return student

    def update_student(self, student_id, student_data):
        def work():
            student = self.repository.update(student_id, student_data)
            selected = self.selected_student
            self._set(
                students=[student if s.get("id") == student_id else s for s in self.students],
                selected_student=student if selected and selected.get("id") == student_id else selected,
                last_fetched=self.now(),
            )
            return student
        return self._run_action("학생 정보 수정에 실패했습니다.", work)

    def delete_student(self, student_id):
        def work():
            self.repository.delete(student_id)
            selected = self.selected_student
            self._set(
                students=[s for s in self.students if s.get("id") != student_id],
                selected_student=None if selected and selected.get("id") == student_id else selected,
                last_fetched=self.now(),
            )
        self._run_action("학생 삭제에 실패했습니다.", work)

    # --- local queries ---

    def search_students(self, query):
        if not query or not query.strip():
            return self.students
        needle = query.strip().lower()
        fields = ("name", "category", "level", "book")
        return [s for s in self.students if any(needle in (s.get(f) or "").lower() for f in fields)]

    def filter_by_category(self, category):
        if not category:
            return self.students
        return [s for s in self.students if s.get("category") == category]

    def filter_by_level(self, level):
        if not level:
            return self.students
        return [s for s in self.students if s.get("level") == level]

    def get_unpaid_students(self):
        return [s for s in self.students if s.get("unpaid") is True]

    def get_low_ticket_students(self):
        return [
            s for s in self.students
            if s.get("ticketType") == "count" and (s.get("ticketCount") or 0) <= 1
        ]

    # --- realtime ---

    def _on_snapshot(self, students):
        self._set(students=students, last_fetched=self.now())
