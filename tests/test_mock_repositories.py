import pytest

from conftest import NEW_ENTITIES
from Pianoacademy.data import MockDataset
from Pianoacademy.errors import NotFoundError, ValidationError


@pytest.mark.parametrize("name", sorted(NEW_ENTITIES))
def test_create_then_get_by_id(repos, name):
    repo = getattr(repos, name)
    created = repo.create(NEW_ENTITIES[name])
    assert created["id"]
    assert created["createdAt"]
    assert repo.get_by_id(created["id"]) == created


@pytest.mark.parametrize("name", sorted(NEW_ENTITIES))
def test_unknown_id_raises_not_found(repos, name):
    repo = getattr(repos, name)
    with pytest.raises(NotFoundError):
        repo.get_by_id("nope")
    with pytest.raises(NotFoundError):
        repo.update("nope", {"x": 1})
    with pytest.raises(NotFoundError):
        repo.delete("nope")


def test_update_merges_and_stamps(repos):
    updated = repos.students.update("2", {"ticketCount": 10})
    assert updated["ticketCount"] == 10
    assert updated["name"] == "박서연"
    assert updated["updatedAt"]


def test_delete_removes(repos):
    assert repos.students.delete("3") == {"success": True}
    with pytest.raises(NotFoundError):
        repos.students.get_by_id("3")


def test_required_fields_checked_before_write(repos, dataset):
    before = len(dataset.students)
    with pytest.raises(ValidationError):
        repos.students.create({"category": "초등"})
    assert len(dataset.students) == before


def test_returned_entities_are_copies(repos, dataset):
    student = repos.students.get_by_id("1")
    student["name"] = "changed"
    assert dataset.students[0]["name"] == "김지우"


def test_datasets_do_not_share_state():
    a, b = MockDataset(), MockDataset()
    a.students.clear()
    assert len(b.students) == 10


def test_new_ids_are_unique(dataset):
    ids = {dataset.new_id() for _ in range(50)}
    assert len(ids) == 50


def test_student_queries(repos):
    assert [s["id"] for s in repos.students.get_unpaid_students()] == ["2", "5", "8"]
    assert {s["category"] for s in repos.students.get_by_category("성인")} == {"성인"}
    assert [s["name"] for s in repos.students.search("지우")] == ["김지우"]
    assert len(repos.students.search("  ")) == 10


def test_attendance_queries(repos):
    assert len(repos.attendance.get_by_student_id("1")) == 2
    assert [r["id"] for r in repos.attendance.get_by_date("2025.01.07")] == ["3"]
    in_range = repos.attendance.get_by_date_range("2025-01-07", "2025-01-08")
    assert sorted(r["id"] for r in in_range) == ["2", "3"]


def test_attendance_rejects_unknown_status(repos):
    with pytest.raises(ValidationError):
        repos.attendance.create({"studentId": "1", "date": "2025-01-13", "status": "sick"})


def test_notice_confirm_is_capped_and_counted_once_per_reader(repos):
    notice = repos.notices.create({"title": "t", "content": "c", "recipients": ["1", "2"]})
    assert notice["total"] == 2
    assert notice["confirmed"] == 0
    repos.notices.confirm(notice["id"], "1")
    again = repos.notices.confirm(notice["id"], "1")
    assert again["confirmed"] == 1
    repos.notices.confirm(notice["id"], "2")
    capped = repos.notices.confirm(notice["id"])
    assert capped["confirmed"] == 2


def test_notices_for_student_have_read_flag(repos):
    repos.notices.confirm("1", "1")
    views = repos.notices.get_by_student_id("1")
    assert views[0]["id"] == "1"
    assert views[0]["isRead"] is True


def test_recent_notices_newest_first(repos):
    recent = repos.notices.get_recent(2)
    assert len(recent) == 2
    assert recent[0]["createdAt"] >= recent[1]["createdAt"]


def test_payment_defaults_and_mark_as_paid(repos):
    payment = repos.payments.create({"studentId": "2", "amount": 280000, "date": "2025.02.03"})
    assert payment["status"] == "paid"
    assert payment["date"] == "2025-02-03"
    assert payment["month"] == "2025-02"
    assert [p["id"] for p in repos.payments.get_unpaid()] == ["3"]
    paid = repos.payments.mark_as_paid("3", "2025-01-20")
    assert paid["status"] == "paid"
    assert paid["paidDate"] == "2025-01-20"
    assert repos.payments.get_unpaid() == []


def test_payment_amount_validated(repos):
    with pytest.raises(ValidationError):
        repos.payments.create({"studentId": "1", "amount": -5})


def test_public_lesson_notes_only(repos):
    notes = repos.lesson_notes.get_by_student_id("1")
    public = repos.lesson_notes.get_public_by_student_id("1")
    assert len(public) <= len(notes)
    assert all(n["isPublic"] for n in public)


def test_activities_are_append_only(repos):
    assert not hasattr(repos.activities, "update")
    assert not hasattr(repos.activities, "delete")
    created = repos.activities.create({"type": "payment", "title": "결제"})
    assert repos.activities.get_recent(1)[0]["id"] == created["id"]
    assert all(a["type"] == "payment" for a in repos.activities.get_by_type("payment"))


def test_expense_category_validated(repos):
    with pytest.raises(ValidationError):
        repos.expenses.create({"category": "TRAVEL", "amount": 1000, "date": "2025-01-01"})


def test_notifications_mark_all_as_read(repos):
    repos.notifications.create({"type": "student_added", "title": "새 학생 등록"})
    assert repos.notifications.get_all(is_read=False)
    result = repos.notifications.mark_all_as_read()
    assert result["success"] is True
    assert result["count"] >= 1
    assert repos.notifications.get_all(is_read=False) == []


def test_mock_subscribe_is_closed_handle(repos):
    assert repos.notifications.subscribe(lambda items: None).closed
