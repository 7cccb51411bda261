from dataclasses import dataclass

from Pianoacademy.stores.attendance_store import AttendanceStore
from Pianoacademy.stores.auth_store import AuthStore
from Pianoacademy.stores.effects import SideEffectQueue
from Pianoacademy.stores.lesson_note_store import LessonNoteStore
from Pianoacademy.stores.notice_store import NoticeStore
from Pianoacademy.stores.notification_store import NotificationStore
from Pianoacademy.stores.payment_store import PaymentStore
from Pianoacademy.stores.student_store import StudentStore


@dataclass
class Stores:
    auth: AuthStore
    notifications: NotificationStore
    students: StudentStore
    attendance: AttendanceStore
    notices: NoticeStore
    payments: PaymentStore
    lesson_notes: LessonNoteStore

    def data_stores(self):
        return [self.notifications, self.students, self.attendance, self.notices, self.payments, self.lesson_notes]

    def reset_data(self):
        """Drop cached data and close live listeners."""
        for store in self.data_stores():
            store.reset()


def build_stores(repos, effects, auth=None, clock=None) -> Stores:
    auth = auth or AuthStore(clock=clock)
    user = auth.current_user_id
    notifications = NotificationStore(repos.notifications, clock=clock)
    stores = Stores(
        auth=auth,
        notifications=notifications,
        students=StudentStore(repos.students, effects, notifications, user, clock=clock),
        attendance=AttendanceStore(repos.attendance, effects, notifications, user, clock=clock),
        notices=NoticeStore(repos.notices, effects, repos.activities, user, clock=clock),
        payments=PaymentStore(repos.payments, effects, notifications, repos.activities, user, clock=clock),
        lesson_notes=LessonNoteStore(repos.lesson_notes, effects, repos.activities, user, clock=clock),
    )

    def on_auth_change(store):
        if not store.is_authenticated:
            stores.reset_data()
    auth.subscribe(on_auth_change)
    return stores


__all__ = [
    "AttendanceStore",
    "AuthStore",
    "LessonNoteStore",
    "NoticeStore",
    "NotificationStore",
    "PaymentStore",
    "SideEffectQueue",
    "StudentStore",
    "Stores",
    "build_stores",
]
