import copy
from unittest.mock import MagicMock

import pytest

from Pianoacademy.errors import NotFoundError
from Pianoacademy.services.subscription import Subscription
from Pianoacademy.stores import build_stores
from Pianoacademy.stores.effects import SideEffectQueue


class QuietSource:
    """Realtime source whose listener never fires."""

    def __init__(self, name):
        self.name = name

    def subscribe(self, callback):
        return Subscription(self.name, lambda: None)


@pytest.fixture
def stores(repos, clock):
    built = build_stores(repos, SideEffectQueue(), clock=clock)
    built.auth.login({"uid": "teacher-1", "role": "teacher"})
    return built


def test_fetch_students_is_cached_for_five_minutes(repos, clock):
    repo = MagicMock(wraps=repos.students)
    stores = build_stores(repos, SideEffectQueue(), clock=clock)
    stores.students.repository = repo

    stores.students.fetch_students()
    clock.advance(299)
    stores.students.fetch_students()
    assert repo.get_all.call_count == 1

    stores.students.fetch_students(force_refresh=True)
    assert repo.get_all.call_count == 2

    clock.advance(300)
    stores.students.fetch_students()
    assert repo.get_all.call_count == 3


def test_attendance_cache_window_is_three_minutes(repos, clock):
    repo = MagicMock(wraps=repos.attendance)
    stores = build_stores(repos, SideEffectQueue(), clock=clock)
    stores.attendance.repository = repo
    stores.attendance.fetch_all_records()
    clock.advance(181)
    stores.attendance.fetch_all_records()
    assert repo.get_all.call_count == 2


def test_failed_action_sets_error_and_resets_loading(stores):
    with pytest.raises(NotFoundError):
        stores.students.delete_student("nope")
    assert stores.students.error == "학생을 찾을 수 없습니다"
    assert stores.students.loading is False
    stores.students.clear_error()
    assert stores.students.error is None


def test_listeners_see_loading_transitions(stores):
    seen = []
    unsubscribe = stores.students.subscribe(lambda store: seen.append(store.loading))
    stores.students.fetch_students()
    assert seen[0] is True
    assert seen[-1] is False
    unsubscribe()
    count = len(seen)
    stores.students.fetch_students(force_refresh=True)
    assert len(seen) == count


def test_add_student_appends_and_notifies(stores):
    stores.students.fetch_students()
    student = stores.students.add_student({"name": "오하늘", "category": "초등"})
    assert stores.students.students[-1]["id"] == student["id"]
    first = stores.notifications.notifications[0]
    assert first["type"] == "student_added"
    assert first["targetId"] == student["id"]
    assert "오하늘" in first["message"]


def test_side_effects_skipped_without_user(repos, clock):
    stores = build_stores(repos, SideEffectQueue(), clock=clock)
    stores.students.add_student({"name": "오하늘"})
    assert stores.notifications.notifications == []


def test_failed_side_effect_does_not_fail_mutation(stores):
    stores.notifications.repository = MagicMock()
    stores.notifications.repository.create.side_effect = RuntimeError("offline")
    effects = stores.students.effects
    student = stores.students.add_student({"name": "오하늘"})
    assert student["id"]
    assert len(effects.failed) == 1
    assert effects.failed[0].attempts == 3


def test_student_local_queries(stores):
    stores.students.fetch_students()
    assert [s["id"] for s in stores.students.get_unpaid_students()] == ["2", "5", "8"]
    assert [s["id"] for s in stores.students.get_low_ticket_students()] == ["8"]
    assert len(stores.students.filter_by_level("고급")) == 2
    assert stores.students.search_students("체르니")
    stores.students.select_student("4")
    assert stores.students.selected_student["name"] == "최예은"
    stores.students.delete_student("4")
    assert stores.students.selected_student is None


def test_absence_raises_notification(stores):
    stores.attendance.add_record({"studentId": "3", "studentName": "이민준", "date": "2025-01-10",
                                  "status": "absent"})
    assert stores.attendance.get_stats("3")["absent"] == 1
    assert stores.notifications.notifications[0]["type"] == "attendance_absent"


def test_attendance_student_stats(stores):
    stores.attendance.fetch_student_records("2")
    stats = stores.attendance.get_stats("2")
    assert stats["total"] == 2
    assert stats["rate"] == 50
    assert stores.attendance.get_stats("unknown")["total"] == 0


def test_payment_flow_updates_stats_and_logs(stores, repos):
    stores.payments.fetch_all_payments()
    assert stores.payments.stats["unpaidCount"] == 1
    stores.payments.add_payment({
        "studentId": "4", "studentName": "최예은", "amount": 150000,
        "ticketInfo": {"ticketType": "count", "ticketCount": 2},
    })
    assert stores.notifications.notifications[0]["type"] == "payment_received"
    assert "150,000원" in stores.notifications.notifications[0]["message"]
    assert repos.activities.get_recent(1)[0]["title"] == "수강료 결제"
    assert stores.payments.get_ticket("4")["status"]["status"] == "warning"
    assert stores.payments.stats["lowTicketCount"] == 1

    stores.payments.mark_as_paid("3")
    assert stores.payments.stats["unpaidCount"] == 0


def test_decrement_ticket_count(stores):
    stores.payments.update_ticket("1", {"ticketType": "count", "ticketCount": 1})
    ticket = stores.payments.decrement_ticket_count("1")
    assert ticket["ticketCount"] == 0
    assert ticket["status"]["status"] == "expired"
    assert stores.payments.decrement_ticket_count("1")["ticketCount"] == 0


def test_notice_create_prepends(stores):
    stores.notices.fetch_notices()
    notice = stores.notices.create_notice({"title": "공지", "content": "내용", "recipients": ["1"]})
    assert stores.notices.notices[0]["id"] == notice["id"]
    assert stores.notices.filter_by_template("event")[0]["id"] == "1"
    assert stores.notices.search_notices("발표회")[0]["id"] == "1"


def test_lesson_note_store(stores):
    note = stores.lesson_notes.add_lesson_note({"studentId": "1", "date": "2025-01-13", "progress": "바이엘 46번"})
    assert stores.lesson_notes.lesson_notes[0]["id"] == note["id"]
    assert stores.lesson_notes.get_student_notes("1")[0]["id"] == note["id"]
    stores.lesson_notes.delete_lesson_note(note["id"])
    assert stores.lesson_notes.get_student_notes("1") == []


def test_notification_store_read_state(stores):
    stores.notifications.fetch_notifications()
    assert stores.notifications.get_unread_count() == 1
    stores.notifications.mark_all_as_read()
    assert stores.notifications.get_unread_count() == 0
    stores.notifications.clear_all()
    assert stores.notifications.notifications == []


def test_bind_realtime_replaces_students(stores):
    captured = {}

    class Source:
        def subscribe(self, callback):
            captured["callback"] = callback
            return Subscription("students", lambda: None)

    handle = stores.students.bind_realtime(Source())
    captured["callback"]([{"id": "x", "name": "실시간"}])
    assert stores.students.students == [{"id": "x", "name": "실시간"}]
    stores.students.reset()
    assert handle.closed
    assert stores.students.students == []


def test_auth_store_roles(stores):
    assert stores.auth.is_teacher()
    stores.auth.switch_role("parent")
    assert stores.auth.is_parent()
    assert stores.auth.current_user_id() == "teacher-1"
    stores.auth.logout()
    assert stores.auth.current_user_id() is None


def test_add_student_leaves_other_stores_untouched(stores):
    stores.attendance.fetch_student_records("1")
    stores.attendance.fetch_student_records("2")
    stores.payments.fetch_student_payments("1")
    records = copy.deepcopy(stores.attendance.student_records)
    payments = copy.deepcopy(stores.payments.student_payments)
    assert records and payments

    stores.students.add_student({"name": "오하늘", "category": "초등"})
    assert stores.attendance.student_records == records
    assert stores.payments.student_payments == payments


@pytest.mark.parametrize("name", ["students", "notices", "notifications"])
def test_reset_closes_realtime_listener(stores, name):
    store = getattr(stores, name)
    first = store.bind_realtime(QuietSource(name))
    second = store.bind_realtime(QuietSource(name))
    assert first.closed
    assert not second.closed
    store.reset()
    assert second.closed
    assert store.loading is False


def test_logout_resets_data_stores(stores):
    stores.students.fetch_students()
    handle = stores.notices.bind_realtime(QuietSource("notices"))
    stores.auth.logout()
    assert handle.closed
    assert stores.students.students == []
    assert stores.students.last_fetched is None
