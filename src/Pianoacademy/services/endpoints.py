"""REST paths (relative to the versioned base URL)."""
from urllib.parse import quote

ENDPOINTS = {
    "auth": {
        "login": "/auth/login",
        "logout": "/auth/logout",
        "register": "/auth/register",
        "refresh_token": "/auth/refresh",
        "verify_token": "/auth/verify",
    },
    "students": {
        "list": "/students",
        "detail": "/students/{id}",
        "create": "/students",
        "update": "/students/{id}",
        "delete": "/students/{id}",
    },
    "attendance": {
        "list": "/attendance",
        "by_student": "/attendance/student/{student_id}",
        "by_date": "/attendance/date/{date}",
        "create": "/attendance",
        "detail": "/attendance/{id}",
        "update": "/attendance/{id}",
        "delete": "/attendance/{id}",
        "stats": "/attendance/stats/{student_id}",
    },
    "notices": {
        "list": "/notices",
        "detail": "/notices/{id}",
        "create": "/notices",
        "update": "/notices/{id}",
        "delete": "/notices/{id}",
        "confirm": "/notices/{id}/confirm",
        "by_student": "/notices/student/{student_id}",
    },
    "payments": {
        "list": "/payments",
        "detail": "/payments/{id}",
        "by_student": "/payments/student/{student_id}",
        "create": "/payments",
        "update": "/payments/{id}",
        "delete": "/payments/{id}",
        "stats": "/payments/stats",
    },
    "lesson_notes": {
        "list": "/lesson-notes",
        "detail": "/lesson-notes/{id}",
        "by_student": "/lesson-notes/student/{student_id}",
        "create": "/lesson-notes",
        "update": "/lesson-notes/{id}",
        "delete": "/lesson-notes/{id}",
    },
    "progress": {
        "list": "/progress",
        "detail": "/progress/{id}",
        "by_student": "/progress/student/{student_id}",
        "create": "/progress",
        "update": "/progress/{id}",
        "delete": "/progress/{id}",
        "song": "/progress/{id}/songs",
        "songs": "/progress/student/{student_id}/songs",
    },
    "activities": {
        "list": "/activities",
        "recent": "/activities/recent",
        "by_type": "/activities/type/{type}",
        "create": "/activities",
    },
    "dashboard": {
        "teacher": "/dashboard/teacher",
        "parent": "/dashboard/parent/{child_id}",
        "stats": "/dashboard/stats",
    },
    "expenses": {
        "list": "/expenses",
        "detail": "/expenses/{id}",
        "create": "/expenses",
        "update": "/expenses/{id}",
        "delete": "/expenses/{id}",
        "stats": "/expenses/stats",
    },
    "schedule_requests": {
        "list": "/schedule-requests",
        "detail": "/schedule-requests/{id}",
        "create": "/schedule-requests",
        "update": "/schedule-requests/{id}",
    },
    "notifications": {
        "list": "/notifications",
        "create": "/notifications",
        "detail": "/notifications/{id}",
        "read": "/notifications/{id}/read",
        "read_all": "/notifications/read-all",
        "delete": "/notifications/{id}",
    },
    "parent": {
        "recent_activities": "/parent/{child_id}/recent-activities",
        "today_schedule": "/parent/{child_id}/today-schedule",
        "weekly_tasks": "/parent/{child_id}/weekly-tasks",
        "upcoming_classes": "/parent/{child_id}/upcoming-classes",
        "gallery": "/parent/{child_id}/gallery",
        "timeline": "/parent/{child_id}/timeline",
        "achievements": "/parent/{child_id}/achievements",
        "ticket_prices": "/ticket-prices",
    },
}


def endpoint(group, name, **ids) -> str:
    """Resolve a path template, e.g. ``endpoint("students", "detail", id="3")``."""
    template = ENDPOINTS[group][name]
    return template.format(**{k: quote(str(v), safe="") for k, v in ids.items()})
