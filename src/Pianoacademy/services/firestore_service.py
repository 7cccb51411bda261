"""
Firestore access for firebase mode.

Every public method returns a result dict and never raises:
``{"success": True, "data": ...}`` / ``{"success": True, "id": ...}`` or
``{"success": False, "error": message}`` (plus ``"notFound": True`` when the
document is absent). Repositories turn failures into exceptions.
"""
import logging
from datetime import date, datetime, time, timezone

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from Pianoacademy.core.formatters import parse_date
from Pianoacademy.services.subscription import Subscription

logger = logging.getLogger(__name__)

STUDENTS = "students"
ATTENDANCE = "attendance"
LESSON_NOTES = "lessonNotes"
PROGRESS = "progress"
NOTICES = "notices"
TUITION = "tuition"
EXPENSES = "expenses"
ACTIVITIES = "activities"
NOTIFICATIONS = "notifications"
GALLERY = "gallery"
SCHEDULE_REQUESTS = "scheduleChangeRequests"
USERS = "users"

BATCH_LIMIT = 500
NOTIFICATION_FEED_LIMIT = 50

NOT_FOUND_MESSAGES = {
    STUDENTS: "학생을 찾을 수 없습니다",
    ATTENDANCE: "출석 기록을 찾을 수 없습니다",
    LESSON_NOTES: "수업 기록을 찾을 수 없습니다",
    PROGRESS: "진도 정보를 찾을 수 없습니다",
    NOTICES: "알림장을 찾을 수 없습니다",
    TUITION: "결제 내역을 찾을 수 없습니다",
    EXPENSES: "지출 내역을 찾을 수 없습니다",
    GALLERY: "갤러리 항목을 찾을 수 없습니다",
    SCHEDULE_REQUESTS: "일정 변경 요청을 찾을 수 없습니다",
    USERS: "사용자 정보를 찾을 수 없습니다",
}


class _Missing(LookupError):
    pass


def normalize(value):
    """Convert Firestore timestamps (datetime subclasses) to ISO strings, recursively."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(v) for v in value]
    return value


def snapshot_to_dict(snapshot):
    data = normalize(snapshot.to_dict() or {})
    data["id"] = snapshot.id
    return data


def _day_bounds(start, end):
    start_dt = datetime.combine(parse_date(start), time.min, tzinfo=timezone.utc)
    end_dt = datetime.combine(parse_date(end), time.max, tzinfo=timezone.utc)
    return start_dt, end_dt


def _iso(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class RemoteDataService:

    def __init__(self, client):
        self.client = client

    # --- plumbing ---

    def _run(self, label, fn):
        try:
            return fn()
        except _Missing as e:
            return {"success": False, "error": str(e), "notFound": True}
        except Exception as e:
            logger.error("%s error: %s", label, e)
            return {"success": False, "error": str(e)}

    def _collection(self, name):
        return self.client.collection(name)

    def _query(self, name, filters=(), order_by=None, direction="desc", limit=None):
        query = self._collection(name)
        for field, op, value in filters:
            query = query.where(filter=FieldFilter(field, op, value))
        if order_by:
            query = query.order_by(
                order_by,
                direction=firestore.Query.DESCENDING if direction == "desc" else firestore.Query.ASCENDING,
            )
        if limit:
            query = query.limit(limit)
        return query

    def _list(self, name, filters=(), order_by=None, direction="desc", limit=None):
        query = self._query(name, filters, order_by, direction, limit)
        return {"success": True, "data": [snapshot_to_dict(s) for s in query.stream()]}

    def _snapshot(self, name, doc_id, transaction=None):
        ref = self._collection(name).document(doc_id)
        snapshot = ref.get(transaction=transaction) if transaction is not None else ref.get()
        if not snapshot.exists:
            raise _Missing(NOT_FOUND_MESSAGES.get(name, "문서를 찾을 수 없습니다"))
        return ref, snapshot

    def _get(self, name, doc_id):
        _, snapshot = self._snapshot(name, doc_id)
        return {"success": True, "data": snapshot_to_dict(snapshot)}

    def _add(self, name, data, teacher_id=None, stamp_field=None):
        payload = dict(data)
        if teacher_id is not None:
            payload["teacherId"] = teacher_id
        if stamp_field:
            payload[stamp_field] = firestore.SERVER_TIMESTAMP
        else:
            payload["createdAt"] = firestore.SERVER_TIMESTAMP
            payload["updatedAt"] = firestore.SERVER_TIMESTAMP
        _, ref = self._collection(name).add(payload)
        return {"success": True, "id": ref.id}

    def _update(self, name, doc_id, data):
        ref, _ = self._snapshot(name, doc_id)
        ref.update({**data, "updatedAt": firestore.SERVER_TIMESTAMP})
        return {"success": True}

    def _delete(self, name, doc_id):
        self._collection(name).document(doc_id).delete()
        return {"success": True}

    # --- students ---

    def get_all_students(self, teacher_id, order_by="createdAt", direction="desc", limit=None):
        return self._run("Get students", lambda: self._list(
            STUDENTS, [("teacherId", "==", teacher_id)], order_by, direction, limit))

    def get_student_by_id(self, student_id):
        return self._run("Get student", lambda: self._get(STUDENTS, student_id))

    def add_student(self, student_data, teacher_id):
        return self._run("Add student", lambda: self._add(STUDENTS, student_data, teacher_id))

    def update_student(self, student_id, student_data):
        return self._run("Update student", lambda: self._update(STUDENTS, student_id, student_data))

    def delete_student(self, student_id):
        return self._run("Delete student", lambda: self._delete(STUDENTS, student_id))

    # --- attendance ---

    def get_attendance_by_date(self, teacher_id, day):
        return self._run("Get attendance by date", lambda: self._list(
            ATTENDANCE, [("teacherId", "==", teacher_id), ("date", "==", _iso(day))]))

    def get_attendance_by_range(self, teacher_id, start, end):
        return self._run("Get attendance by range", lambda: self._list(
            ATTENDANCE,
            [("teacherId", "==", teacher_id), ("date", ">=", _iso(start)), ("date", "<=", _iso(end))],
            order_by="date",
        ))

    def get_attendance_by_student_id(self, student_id):
        return self._run("Get attendance by student", lambda: self._list(
            ATTENDANCE, [("studentId", "==", student_id)], order_by="date"))

    def get_attendance_by_id(self, attendance_id):
        return self._run("Get attendance", lambda: self._get(ATTENDANCE, attendance_id))

    def save_attendance(self, attendance_data, teacher_id):
        return self._run("Save attendance", lambda: self._add(ATTENDANCE, attendance_data, teacher_id))

    def update_attendance(self, attendance_id, attendance_data):
        return self._run("Update attendance", lambda: self._update(ATTENDANCE, attendance_id, attendance_data))

    def delete_attendance(self, attendance_id):
        return self._run("Delete attendance", lambda: self._delete(ATTENDANCE, attendance_id))

    # --- lesson notes ---

    def get_lesson_notes(self, teacher_id, student_id=None, start_date=None, end_date=None, limit=None):
        filters = [("teacherId", "==", teacher_id)]
        if student_id:
            filters.append(("studentId", "==", student_id))
        elif start_date and end_date:
            filters.append(("date", ">=", _iso(start_date)))
            filters.append(("date", "<=", _iso(end_date)))
        return self._run("Get lesson notes", lambda: self._list(
            LESSON_NOTES, filters, order_by="date", limit=limit))

    def get_lesson_notes_by_student(self, student_id, public_only=True, limit=None):
        filters = [("studentId", "==", student_id)]
        if public_only:
            filters.append(("isPublic", "==", True))
        return self._run("Get lesson notes by student", lambda: self._list(
            LESSON_NOTES, filters, order_by="date", limit=limit))

    def get_lesson_note_by_id(self, note_id):
        return self._run("Get lesson note", lambda: self._get(LESSON_NOTES, note_id))

    def save_lesson_note(self, note_data, teacher_id):
        return self._run("Save lesson note", lambda: self._add(LESSON_NOTES, note_data, teacher_id))

    def update_lesson_note(self, note_id, note_data):
        return self._run("Update lesson note", lambda: self._update(LESSON_NOTES, note_id, note_data))

    def delete_lesson_note(self, note_id):
        return self._run("Delete lesson note", lambda: self._delete(LESSON_NOTES, note_id))

    # --- progress ---

    def get_all_progress(self, teacher_id):
        return self._run("Get progress", lambda: self._list(
            PROGRESS, [("teacherId", "==", teacher_id)], order_by="updatedAt"))

    def get_progress_by_student(self, student_id):
        return self._run("Get progress by student", lambda: self._list(
            PROGRESS, [("studentId", "==", student_id)], order_by="updatedAt"))

    def get_progress_by_book(self, student_id, book_name):
        return self._run("Get progress by book", lambda: self._list(
            PROGRESS, [("studentId", "==", student_id), ("book.name", "==", book_name)], limit=1))

    def get_progress_by_id(self, progress_id):
        return self._run("Get progress entry", lambda: self._get(PROGRESS, progress_id))

    def add_progress(self, progress_data, teacher_id):
        return self._run("Add progress", lambda: self._add(PROGRESS, progress_data, teacher_id))

    def update_progress(self, progress_id, progress_data):
        return self._run("Update progress", lambda: self._update(PROGRESS, progress_id, progress_data))

    def delete_progress(self, progress_id):
        return self._run("Delete progress", lambda: self._delete(PROGRESS, progress_id))

    # --- notices ---

    def get_all_notices(self, teacher_id, limit=None):
        return self._run("Get notices", lambda: self._list(
            NOTICES, [("teacherId", "==", teacher_id)], order_by="createdAt", limit=limit))

    def get_notice_by_id(self, notice_id):
        return self._run("Get notice", lambda: self._get(NOTICES, notice_id))

    def create_notice(self, notice_data, teacher_id):
        data = {"readBy": [], "confirmed": 0, **notice_data}
        return self._run("Create notice", lambda: self._add(NOTICES, data, teacher_id))

    def update_notice(self, notice_id, notice_data):
        return self._run("Update notice", lambda: self._update(NOTICES, notice_id, notice_data))

    def delete_notice(self, notice_id):
        return self._run("Delete notice", lambda: self._delete(NOTICES, notice_id))

    def mark_notice_as_read(self, notice_id, student_id):
        def work():
            ref, snapshot = self._snapshot(NOTICES, notice_id)
            data = snapshot.to_dict() or {}
            read_by = data.get("readBy") or []
            if any(item.get("studentId") == student_id for item in read_by):
                return {"success": True, "message": "이미 읽음 처리되었습니다"}
            # SERVER_TIMESTAMP is not allowed inside array elements
            entry = {"studentId": student_id, "readAt": datetime.now(timezone.utc)}
            ref.update({
                "readBy": read_by + [entry],
                "confirmed": (data.get("confirmed") or 0) + 1,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
            return {"success": True}
        return self._run("Mark notice as read", work)

    def get_notices_for_student(self, student_id, teacher_id=None, unread_only=False):
        def work():
            filters = [("teacherId", "==", teacher_id)] if teacher_id else []
            query = self._query(NOTICES, filters, order_by="createdAt")
            notices = []
            for snapshot in query.stream():
                notice = snapshot_to_dict(snapshot)
                if student_id not in (notice.get("recipients") or []):
                    continue
                read_info = next(
                    (item for item in notice.get("readBy") or [] if item.get("studentId") == student_id),
                    None,
                )
                if unread_only and read_info:
                    continue
                notice["isRead"] = read_info is not None
                notice["readAt"] = read_info.get("readAt") if read_info else None
                notices.append(notice)
            return {"success": True, "data": notices}
        return self._run("Get notices for student", work)

    # --- tuition (sharded by month "YYYY-MM") ---

    def get_tuition_records(self, teacher_id, month):
        return self._run("Get tuition records", lambda: self._list(
            TUITION, [("teacherId", "==", teacher_id), ("month", "==", month)]))

    def get_tuition_by_student_id(self, student_id):
        return self._run("Get tuition by student", lambda: self._list(
            TUITION, [("studentId", "==", student_id)], order_by="date"))

    def get_tuition_by_id(self, tuition_id):
        return self._run("Get tuition", lambda: self._get(TUITION, tuition_id))

    def save_tuition_record(self, tuition_data, teacher_id):
        return self._run("Save tuition", lambda: self._add(TUITION, tuition_data, teacher_id))

    def update_tuition_record(self, tuition_id, tuition_data):
        return self._run("Update tuition", lambda: self._update(TUITION, tuition_id, tuition_data))

    def update_tuition_status(self, tuition_id, is_paid, paid_date=None):
        patch = {
            "isPaid": bool(is_paid),
            "status": "paid" if is_paid else "unpaid",
            "paidDate": _iso(paid_date),
        }
        return self._run("Update tuition status", lambda: self._update(TUITION, tuition_id, patch))

    def delete_tuition_record(self, tuition_id):
        return self._run("Delete tuition", lambda: self._delete(TUITION, tuition_id))

    # --- expenses ---

    def get_expenses_by_teacher(self, teacher_id):
        return self._run("Get expenses", lambda: self._list(
            EXPENSES, [("teacherId", "==", teacher_id)], order_by="date"))

    def get_expenses_by_range(self, teacher_id, start, end):
        return self._run("Get expenses by range", lambda: self._list(
            EXPENSES,
            [("teacherId", "==", teacher_id), ("date", ">=", _iso(start)), ("date", "<=", _iso(end))],
            order_by="date",
        ))

    def get_expense_by_id(self, expense_id):
        return self._run("Get expense", lambda: self._get(EXPENSES, expense_id))

    def add_expense(self, expense_data, teacher_id):
        return self._run("Add expense", lambda: self._add(EXPENSES, expense_data, teacher_id))

    def update_expense(self, expense_id, expense_data):
        return self._run("Update expense", lambda: self._update(EXPENSES, expense_id, expense_data))

    def delete_expense(self, expense_id):
        return self._run("Delete expense", lambda: self._delete(EXPENSES, expense_id))

    # --- activities (append-only) ---

    def get_activities(self, teacher_id, type=None, student_id=None, limit=None):
        filters = [("teacherId", "==", teacher_id)]
        if type:
            filters.append(("type", "==", type))
        if student_id:
            filters.append(("studentId", "==", student_id))
        return self._run("Get activities", lambda: self._list(
            ACTIVITIES, filters, order_by="timestamp", limit=limit))

    def add_activity(self, activity_data, teacher_id):
        return self._run("Add activity", lambda: self._add(
            ACTIVITIES, activity_data, teacher_id, stamp_field="timestamp"))

    def get_activities_by_date_range(self, teacher_id, start, end):
        def work():
            start_dt, end_dt = _day_bounds(start, end)
            return self._list(
                ACTIVITIES,
                [("teacherId", "==", teacher_id), ("timestamp", ">=", start_dt), ("timestamp", "<=", end_dt)],
                order_by="timestamp",
            )
        return self._run("Get activities by range", work)

    # --- notifications ---

    def get_notifications(self, teacher_id, is_read=None, limit=None):
        filters = [("teacherId", "==", teacher_id)]
        if is_read is not None:
            filters.append(("isRead", "==", is_read))
        return self._run("Get notifications", lambda: self._list(
            NOTIFICATIONS, filters, order_by="timestamp", limit=limit))

    def add_notification(self, notification_data, teacher_id):
        data = {**notification_data, "isRead": False}
        return self._run("Add notification", lambda: self._add(
            NOTIFICATIONS, data, teacher_id, stamp_field="timestamp"))

    def mark_notification_as_read(self, notification_id):
        def work():
            self._collection(NOTIFICATIONS).document(notification_id).update({
                "isRead": True,
                "readAt": firestore.SERVER_TIMESTAMP,
            })
            return {"success": True}
        return self._run("Mark notification as read", work)

    def mark_all_notifications_as_read(self, teacher_id):
        def work():
            query = self._query(NOTIFICATIONS, [("teacherId", "==", teacher_id), ("isRead", "==", False)])
            refs = [snapshot.reference for snapshot in query.stream()]
            for start in range(0, len(refs), BATCH_LIMIT):
                batch = self.client.batch()
                for ref in refs[start:start + BATCH_LIMIT]:
                    batch.update(ref, {"isRead": True, "readAt": firestore.SERVER_TIMESTAMP})
                batch.commit()
            return {"success": True, "count": len(refs)}
        return self._run("Mark all notifications as read", work)

    def delete_notification(self, notification_id):
        return self._run("Delete notification", lambda: self._delete(NOTIFICATIONS, notification_id))

    # --- gallery ---

    def get_gallery_items(self, teacher_id, category=None, album=None):
        filters = [("teacherId", "==", teacher_id)]
        if category:
            filters.append(("category", "==", category))
        if album:
            filters.append(("album", "==", album))
        return self._run("Get gallery items", lambda: self._list(GALLERY, filters, order_by="createdAt"))

    def get_gallery_items_for_student(self, student_id):
        return self._run("Get gallery items for student", lambda: self._list(
            GALLERY, [("studentId", "==", student_id)], order_by="createdAt"))

    def upload_gallery_item(self, item_data, teacher_id):
        data = {**item_data, "likes": 0, "comments": []}
        return self._run("Upload gallery item", lambda: self._add(GALLERY, data, teacher_id))

    def delete_gallery_item(self, item_id):
        return self._run("Delete gallery item", lambda: self._delete(GALLERY, item_id))

    def add_like_to_gallery_item(self, item_id):
        return self._run("Like gallery item", lambda: self._update(
            GALLERY, item_id, {"likes": firestore.Increment(1)}))

    def add_comment_to_gallery_item(self, item_id, comment):
        entry = {**comment, "createdAt": datetime.now(timezone.utc).isoformat()}
        return self._run("Comment gallery item", lambda: self._update(
            GALLERY, item_id, {"comments": firestore.ArrayUnion([entry])}))

    # --- schedule change requests ---

    def create_schedule_change_request(self, request_data):
        data = {**request_data, "status": "pending", "rejectionReason": None}
        return self._run("Create schedule request", lambda: self._add(SCHEDULE_REQUESTS, data))

    def get_schedule_change_requests(self, user_id, user_type="teacher"):
        field = "teacherId" if user_type == "teacher" else "parentId"
        return self._run("Get schedule requests", lambda: self._list(
            SCHEDULE_REQUESTS, [(field, "==", user_id)], order_by="createdAt"))

    def get_schedule_change_request_by_id(self, request_id):
        return self._run("Get schedule request", lambda: self._get(SCHEDULE_REQUESTS, request_id))

    def approve_schedule_change_request(self, request_id):
        """Apply the requested schedule and approve the request in one transaction."""
        def work():
            request_ref = self._collection(SCHEDULE_REQUESTS).document(request_id)

            @firestore.transactional
            def approve(transaction):
                _, snapshot = self._snapshot(SCHEDULE_REQUESTS, request_id, transaction=transaction)
                data = snapshot.to_dict() or {}
                if data.get("status") != "pending":
                    raise ValueError("이미 처리된 요청입니다")
                student_ref = self._collection(STUDENTS).document(data["studentId"])
                transaction.update(student_ref, {
                    "schedule": data.get("requestedSchedule"),
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                })
                transaction.update(request_ref, {
                    "status": "approved",
                    "approvedAt": firestore.SERVER_TIMESTAMP,
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                })
                return data

            data = approve(self.client.transaction())
            return {"success": True, "data": {**normalize(data), "id": request_id, "status": "approved"}}
        return self._run("Approve schedule request", work)

    def reject_schedule_change_request(self, request_id, rejection_reason=""):
        patch = {
            "status": "rejected",
            "rejectionReason": rejection_reason,
            "rejectedAt": firestore.SERVER_TIMESTAMP,
        }
        return self._run("Reject schedule request", lambda: self._update(SCHEDULE_REQUESTS, request_id, patch))

    # --- users ---

    def get_user(self, uid):
        return self._run("Get user", lambda: self._get(USERS, uid))

    def set_user(self, uid, data, merge=True):
        def work():
            self._collection(USERS).document(uid).set(
                {**data, "updatedAt": firestore.SERVER_TIMESTAMP}, merge=merge)
            return {"success": True}
        return self._run("Set user", work)

    # --- batch ---

    def batch_update(self, updates):
        """Apply ``(collection, id, patch)`` triples in one commit (max 500)."""
        updates = list(updates)
        if len(updates) > BATCH_LIMIT:
            return {"success": False, "error": f"한 번에 최대 {BATCH_LIMIT}개까지 업데이트할 수 있습니다"}

        def work():
            batch = self.client.batch()
            for name, doc_id, patch in updates:
                ref = self._collection(name).document(doc_id)
                batch.update(ref, {**patch, "updatedAt": firestore.SERVER_TIMESTAMP})
            batch.commit()
            return {"success": True, "count": len(updates)}
        return self._run("Batch update", work)

    # --- realtime ---

    def _subscribe(self, name, query, callback):
        def on_snapshot(snapshots, changes, read_time):
            try:
                callback([snapshot_to_dict(s) for s in snapshots])
            except Exception as e:
                logger.error("%s listener callback failed: %s", name, e)

        watch = query.on_snapshot(on_snapshot)
        return Subscription(name, watch.unsubscribe)

    def subscribe_to_students(self, teacher_id, callback):
        query = self._query(STUDENTS, [("teacherId", "==", teacher_id)], order_by="createdAt")
        return self._subscribe("students", query, callback)

    def subscribe_to_notices(self, teacher_id, callback):
        query = self._query(NOTICES, [("teacherId", "==", teacher_id)], order_by="createdAt")
        return self._subscribe("notices", query, callback)

    def subscribe_to_notifications(self, teacher_id, callback):
        query = self._query(
            NOTIFICATIONS,
            [("teacherId", "==", teacher_id)],
            order_by="timestamp",
            limit=NOTIFICATION_FEED_LIMIT,
        )
        return self._subscribe("notifications", query, callback)
