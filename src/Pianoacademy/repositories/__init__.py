"""
Repository factory: one backend per process, chosen from ``DataConfig.mode``.
"""
import logging
from dataclasses import dataclass
from typing import Any

from Pianoacademy.config import DataMode
from Pianoacademy.repositories import (
    activities,
    attendance,
    expenses,
    lesson_notes,
    notices,
    notifications,
    parent_data,
    payments,
    progress,
    schedule,
    students,
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    students: Any
    attendance: Any
    notices: Any
    payments: Any
    lesson_notes: Any
    progress: Any
    activities: Any
    expenses: Any
    notifications: Any
    parent_data: Any
    schedule: Any


def _mock(config, dataset):
    if dataset is None:
        from Pianoacademy.data.mock_dataset import MockDataset
        dataset = MockDataset()
    student_repo = students.MockStudentRepository(config, dataset)
    return Repositories(
        students=student_repo,
        attendance=attendance.MockAttendanceRepository(config, dataset),
        notices=notices.MockNoticeRepository(config, dataset),
        payments=payments.MockPaymentRepository(config, dataset),
        lesson_notes=lesson_notes.MockLessonNoteRepository(config, dataset),
        progress=progress.MockProgressRepository(config, dataset),
        activities=activities.MockActivityRepository(config, dataset),
        expenses=expenses.MockExpenseRepository(config, dataset),
        notifications=notifications.MockNotificationRepository(config, dataset),
        parent_data=parent_data.MockParentDataRepository(config, dataset),
        schedule=schedule.MockScheduleRepository(config, dataset, student_repo),
    )


def _api(config, client):
    if client is None:
        from Pianoacademy.services.api_client import ApiClient
        client = ApiClient(config)
    student_repo = students.ApiStudentRepository(config, client)
    return Repositories(
        students=student_repo,
        attendance=attendance.ApiAttendanceRepository(config, client),
        notices=notices.ApiNoticeRepository(config, client),
        payments=payments.ApiPaymentRepository(config, client),
        lesson_notes=lesson_notes.ApiLessonNoteRepository(config, client),
        progress=progress.ApiProgressRepository(config, client),
        activities=activities.ApiActivityRepository(config, client),
        expenses=expenses.ApiExpenseRepository(config, client),
        notifications=notifications.ApiNotificationRepository(config, client),
        parent_data=parent_data.ApiParentDataRepository(config, client),
        schedule=schedule.ApiScheduleRepository(config, client, student_repo),
    )


def _firebase(config, remote, current_user, today):
    if remote is None:
        from google.cloud import firestore
        from Pianoacademy.services.firestore_service import RemoteDataService
        remote = RemoteDataService(firestore.Client(project=config.firebase_project_id))
    student_repo = students.FirebaseStudentRepository(config, remote, current_user)
    return Repositories(
        students=student_repo,
        attendance=attendance.FirebaseAttendanceRepository(config, remote, current_user, today),
        notices=notices.FirebaseNoticeRepository(config, remote, current_user),
        payments=payments.FirebasePaymentRepository(config, remote, current_user, today),
        lesson_notes=lesson_notes.FirebaseLessonNoteRepository(config, remote, current_user),
        progress=progress.FirebaseProgressRepository(config, remote, current_user),
        activities=activities.FirebaseActivityRepository(config, remote, current_user),
        expenses=expenses.FirebaseExpenseRepository(config, remote, current_user),
        notifications=notifications.FirebaseNotificationRepository(config, remote, current_user),
        parent_data=parent_data.FirebaseParentDataRepository(config, remote, current_user, today),
        schedule=schedule.FirebaseScheduleRepository(config, remote, student_repo, current_user),
    )


def build_repositories(config, dataset=None, api_client=None, remote=None, current_user=None, today=None,
                       **overrides) -> Repositories:
    """Build the repository set for ``config.mode``.

    ``current_user`` is a zero-argument callable returning the signed-in
    uid (firebase mode only). ``overrides`` replace individual repositories,
    e.g. ``build_repositories(config, students=fake)``.
    """
    if config.mode is DataMode.MOCK:
        repos = _mock(config, dataset)
    elif config.mode is DataMode.API:
        repos = _api(config, api_client)
    else:
        repos = _firebase(config, remote, current_user, today)
    for name, repo in overrides.items():
        if not hasattr(repos, name):
            raise TypeError(f"unknown repository: {name}")
        setattr(repos, name, repo)
    logger.info("Repositories ready (%s mode)", config.mode.value)
    return repos
