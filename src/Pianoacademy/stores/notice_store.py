import logging

from Pianoacademy.repositories.base import in_date_range
from Pianoacademy.stores.base import EffectsMixin, RealtimeMixin, THREE_MINUTES, Store

logger = logging.getLogger(__name__)


class NoticeStore(RealtimeMixin, EffectsMixin, Store):
    name = "NoticeStore"
    ttl = THREE_MINUTES

    def __init__(self, repository, effects=None, activities=None, current_user=None, clock=None):
        self.repository = repository
        self.effects = effects
        self.activities = activities
        self.current_user = current_user
        super().__init__(clock)

    def _reset_state(self):
        self.notices = []
        self.student_notices = {}
        self.selected_notice = None

    def _replace(self, notice_id, notice):
        selected = self.selected_notice
        self._set(
            notices=[notice if n.get("id") == notice_id else n for n in self.notices],
            selected_notice=notice if selected and selected.get("id") == notice_id else selected,
        )

    def fetch_notices(self, force_refresh=False):
        if not force_refresh and self.is_fresh():
            return self.notices

        def work():
            notices = self.repository.get_all()
            self._set(notices=notices, last_fetched=self.now())
            return notices
        return self._run_action("알림장 목록을 불러오는데 실패했습니다.", work)

    def fetch_notice_by_id(self, notice_id):
        def work():
            notice = self.repository.get_by_id(notice_id)
            self._set(selected_notice=notice)
            return notice
        return self._run_action("알림장을 불러오는데 실패했습니다.", work)

    def fetch_notices_by_student(self, student_id):
        def work():
            notices = self.repository.get_by_student_id(student_id)
            self._set(student_notices={**self.student_notices, student_id: notices})
            return notices
        return self._run_action("알림장 목록을 불러오는데 실패했습니다.", work)

    def select_notice(self, notice_id):
        self._set(selected_notice=next((n for n in self.notices if n.get("id") == notice_id), None))

    def clear_selected_notice(self):
        self._set(selected_notice=None)

    def create_notice(self, notice_data):
        def work():
            notice = self.repository.create(notice_data)
            self._set(notices=[notice] + self.notices, last_fetched=self.now())
            return notice
        notice = self._run_action("알림장 생성에 실패했습니다.", work)
        self._log_activity({
            "type": "notice",
            "action": "add",
            "title": "알림장 발송",
            "description": notice_data.get("title"),
            "relatedId": notice.get("id"),
        })
        return notice

    def update_notice(self, notice_id, updates):
        def work():
            notice = self.repository.update(notice_id, updates)
            self._replace(notice_id, notice)
            self._set(last_fetched=self.now())
            return notice
        return self._run_action("알림장 수정에 실패했습니다.", work)

    def delete_notice(self, notice_id):
        def work():
            self.repository.delete(notice_id)
            selected = self.selected_notice
            self._set(
                notices=[n for n in self.notices if n.get("id") != notice_id],
                selected_notice=None if selected and selected.get("id") == notice_id else selected,
                last_fetched=self.now(),
            )
        self._run_action("알림장 삭제에 실패했습니다.", work)

    def confirm_notice(self, notice_id, parent_id=None):
        def work():
            notice = self.repository.confirm(notice_id, parent_id)
            self._replace(notice_id, notice)
            return notice
        return self._run_action("알림장 확인에 실패했습니다.", work)

    def mark_as_read(self, notice_id, is_read=True):
        """Flip the read flag without touching ``loading``."""
        try:
            notice = self.repository.update(notice_id, {"isRead": is_read})
        except Exception as e:
            logger.error("Changing read state of notice %s failed: %s", notice_id, e)
            raise
        self._replace(notice_id, notice)
        return notice

    # --- local queries ---

    def filter_by_template(self, template):
        if not template:
            return self.notices
        return [n for n in self.notices if n.get("template") == template]

    def filter_by_date_range(self, start_date, end_date):
        return [n for n in self.notices if in_date_range(n.get("date"), start_date, end_date)]

    def get_unread_notices(self):
        return [n for n in self.notices if not n.get("isRead")]

    def get_unread_count(self) -> int:
        return len(self.get_unread_notices())

    def search_notices(self, query):
        if not query or not query.strip():
            return self.notices
        needle = query.strip().lower()
        fields = ("title", "content", "studentName")
        return [n for n in self.notices if any(needle in (n.get(f) or "").lower() for f in fields)]

    def _on_snapshot(self, notices):
        self._set(notices=notices, last_fetched=self.now())
