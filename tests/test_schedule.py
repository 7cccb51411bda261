from unittest.mock import patch

import pytest

from Pianoacademy.core.schedule_utils import (
    TIME_UNSET,
    parse_schedule,
    schedules_for_date,
    upcoming_class_dates,
)
from Pianoacademy.errors import NotFoundError, ValidationError


def test_parse_schedule():
    assert parse_schedule("월/수 14:00") == (["월", "수"], "14:00")
    assert parse_schedule("화") == (["화"], TIME_UNSET)
    assert parse_schedule("") == ([], TIME_UNSET)


def test_schedules_for_date_sorted_with_unset_last():
    students = [
        {"id": "a", "name": "A", "schedule": "월 18:00"},
        {"id": "b", "name": "B", "schedule": "월"},
        {"id": "c", "name": "C", "schedule": "월/수 15:00"},
        {"id": "d", "name": "D", "schedule": "화 15:00"},
    ]
    # 2025-01-06 is a Monday
    result = schedules_for_date(students, "2025-01-06")
    assert [s["studentId"] for s in result] == ["c", "a", "b"]


def test_upcoming_class_dates_includes_today():
    classes = upcoming_class_dates("월/수 16:00", "2025-01-06")
    assert [c["date"] for c in classes] == ["2025-01-06", "2025-01-08"]
    assert upcoming_class_dates(None, "2025-01-06") == []


def test_approve_moves_schedule_and_marks_request(repos):
    approved = repos.schedule.approve("1")
    assert approved["status"] == "approved"
    assert repos.students.get_by_id("1")["schedule"] == "화/목 16:00"


def test_approve_twice_is_rejected(repos):
    repos.schedule.approve("1")
    with pytest.raises(ValidationError):
        repos.schedule.approve("1")


def test_failed_approval_restores_previous_schedule(repos):
    original = type(repos.schedule).update

    def failing_update(self, item_id, partial):
        if partial.get("status") == "approved":
            raise NotFoundError("gone")
        return original(self, item_id, partial)

    with patch.object(type(repos.schedule), "update", failing_update):
        with pytest.raises(NotFoundError):
            repos.schedule.approve("1")

    assert repos.students.get_by_id("1")["schedule"] == "월/수 16:00"
    assert repos.schedule.get_by_id("1")["status"] == "pending"


def test_reject_keeps_student_schedule(repos):
    rejected = repos.schedule.reject("1", "시간 불가")
    assert rejected["status"] == "rejected"
    assert rejected["rejectionReason"] == "시간 불가"
    assert repos.students.get_by_id("1")["schedule"] == "월/수 16:00"


def test_create_and_list_requests(repos):
    created = repos.schedule.create_request({
        "studentId": "2", "parentId": "parent-2", "teacherId": "teacher-1",
        "currentSchedule": "화/목 17:00", "requestedSchedule": "월/수 17:00",
    })
    assert created["status"] == "pending"
    assert [r["id"] for r in repos.schedule.get_requests("parent-2", "parent")] == [created["id"]]
    assert len(repos.schedule.get_requests("teacher-1")) == 2


def test_student_schedule_view(repos):
    view = repos.schedule.get_student_schedule("3")
    assert view["days"] == ["월", "금"]
    assert view["time"] == "18:00"


def test_weekly_schedules_cover_seven_days(repos):
    week = repos.schedule.get_weekly_schedules("2025-01-05")
    assert len(week) == 7
    assert week[0]["day"] == "일"
    monday = week[1]
    assert {s["studentId"] for s in monday["schedules"]} >= {"1", "3", "6", "9"}
