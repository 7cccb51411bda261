import copy
import time
import logging

from Pianoacademy.data import fixtures

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "students",
    "attendance",
    "notices",
    "payments",
    "lesson_notes",
    "progress",
    "activities",
    "notifications",
    "expenses",
    "schedule_requests",
    "gallery",
)

_SEEDS = {
    "students": fixtures.STUDENTS,
    "attendance": fixtures.ATTENDANCE,
    "notices": fixtures.NOTICES,
    "payments": fixtures.PAYMENTS,
    "lesson_notes": fixtures.LESSON_NOTES,
    "progress": fixtures.PROGRESS,
    "activities": fixtures.ACTIVITIES,
    "notifications": fixtures.NOTIFICATIONS,
    "expenses": fixtures.EXPENSES,
    "schedule_requests": fixtures.SCHEDULE_REQUESTS,
    "gallery": fixtures.GALLERY_ITEMS,
}


class MockDataset:
    """In-process backing store for mock mode.

    Each instance owns deep copies of the fixtures, so two datasets never
    share state. Repositories receive the instance by reference.
    """

    def __init__(self, seed=True):
        self._last_id = 0
        for name in COLLECTIONS:
            setattr(self, name, copy.deepcopy(_SEEDS[name]) if seed else [])
        self.teacher_id = fixtures.TEACHER_ID
        self.child_data = copy.deepcopy(fixtures.CHILD_DATA)
        self.parent_recent_activities = copy.deepcopy(fixtures.PARENT_RECENT_ACTIVITIES)
        self.today_schedule = copy.deepcopy(fixtures.TODAY_SCHEDULE)
        self.completed_songs = copy.deepcopy(fixtures.COMPLETED_SONGS)
        self.weekly_tasks = copy.deepcopy(fixtures.WEEKLY_TASKS)
        self.child_attendance = copy.deepcopy(fixtures.CHILD_ATTENDANCE)
        self.upcoming_classes = copy.deepcopy(fixtures.UPCOMING_CLASSES)
        self.payment_history = copy.deepcopy(fixtures.PAYMENT_HISTORY)
        self.ticket_prices = copy.deepcopy(fixtures.TICKET_PRICES)
        self.timeline = copy.deepcopy(fixtures.TIMELINE)
        self.achievements = copy.deepcopy(fixtures.ACHIEVEMENTS)

    def collection(self, name):
        if name not in COLLECTIONS:
            raise KeyError(name)
        return getattr(self, name)

    def new_id(self) -> str:
        """Millisecond timestamp id, bumped when two calls land in the same ms."""
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def find_index(self, name, item_id):
        for index, item in enumerate(self.collection(name)):
            if str(item.get("id")) == str(item_id):
                return index
        return -1
