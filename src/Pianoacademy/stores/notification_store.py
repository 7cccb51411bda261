import logging

from Pianoacademy.stores.base import RealtimeMixin, Store

logger = logging.getLogger(__name__)

# notification types raised by the other stores
STUDENT_ADDED = "student_added"
PAYMENT_RECEIVED = "payment_received"
ATTENDANCE_ABSENT = "attendance_absent"


class NotificationStore(RealtimeMixin, Store):
    name = "NotificationStore"

    def __init__(self, repository, clock=None):
        self.repository = repository
        super().__init__(clock)

    def _reset_state(self):
        self.notifications = []

    def fetch_notifications(self, is_read=None, limit=None):
        def work():
            items = self.repository.get_all(is_read=is_read, limit=limit)
            self._set(notifications=items, last_fetched=self.now())
            return items
        return self._run_action("알림을 불러오는데 실패했습니다.", work)

    def add_notification(self, notification, user_id=None):
        data = dict(notification)
        if user_id and "teacherId" not in data:
            data["teacherId"] = user_id
        created = self.repository.create(data)
        self._set(notifications=[created] + [n for n in self.notifications if n.get("id") != created.get("id")])
        return created

    def mark_as_read(self, notification_id):
        self.repository.mark_as_read(notification_id)
        self._set(notifications=[
            {**n, "isRead": True} if n.get("id") == notification_id else n
            for n in self.notifications
        ])

    def mark_all_as_read(self):
        result = self.repository.mark_all_as_read()
        self._set(notifications=[{**n, "isRead": True} for n in self.notifications])
        return result

    def delete_notification(self, notification_id):
        self.repository.delete(notification_id)
        self._set(notifications=[n for n in self.notifications if n.get("id") != notification_id])

    def clear_all(self):
        """Local only; the stored notifications stay."""
        self._set(notifications=[])

    def get_unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.get("isRead"))

    def _on_snapshot(self, notifications):
        self._set(notifications=notifications, last_fetched=self.now())
