from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    matches,
    now_iso,
    sort_desc,
)

RECENT_LIMIT = 5


def reader_view(notice, student_id):
    """Notice as seen by one recipient: adds isRead / readAt."""
    read_info = next((r for r in notice.get("readBy") or [] if r.get("studentId") == student_id), None)
    return {**notice, "isRead": read_info is not None, "readAt": read_info.get("readAt") if read_info else None}


class NoticeRules:
    name = "NoticeRepository"
    collection_name = "notices"
    group = "notices"
    not_found_message = "알림장을 찾을 수 없습니다"
    required_fields = ("title", "content")

    def get_recent(self, limit=RECENT_LIMIT):
        self._log("get_recent", limit)
        return sort_desc(self.get_all(), "createdAt")[:limit]


class MockNoticeRepository(NoticeRules, MockCrudRepository):
    insert_front = True

    def get_all(self, **filters):
        return sort_desc(super().get_all(**filters), "createdAt")

    def create(self, data):
        total = data.get("total")
        if total is None:
            total = len(data.get("recipients") or []) or len(self.dataset.students)
        return super().create({"readBy": [], **data, "confirmed": 0, "total": total})

    def confirm(self, notice_id, reader_id=None):
        """One more confirmation, capped at ``total``; a reader counts once."""
        self._log("confirm", notice_id, reader_id)
        self._delay()
        notice = self._items()[self._index(notice_id)]
        read_by = notice.get("readBy") or []
        if reader_id is not None and any(r.get("studentId") == reader_id for r in read_by):
            return self.get_by_id(notice_id)
        patch = {"confirmed": min((notice.get("confirmed") or 0) + 1, notice.get("total") or 0)}
        if reader_id is not None:
            patch["readBy"] = read_by + [{"studentId": reader_id, "readAt": now_iso()}]
        return self._patch(notice_id, patch)

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        self._delay()
        notices = self._list(lambda n: student_id in (n.get("recipients") or []))
        return [reader_view(n, student_id) for n in sort_desc(notices, "createdAt")]


class ApiNoticeRepository(NoticeRules, ApiCrudRepository):

    def confirm(self, notice_id, reader_id=None):
        self._log("confirm", notice_id, reader_id)
        body = {"studentId": reader_id} if reader_id is not None else None
        return self._call("confirm", self.client.post, self._path("confirm", id=notice_id), json=body)

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._call("get_by_student_id", self.client.get, self._path("by_student", student_id=student_id))


class FirebaseNoticeRepository(NoticeRules, FirebaseCrudRepository):

    def _remote_list(self, teacher_id, limit=None, **filters):
        result = self.remote.get_all_notices(teacher_id, limit=limit)
        if result.get("success") and filters:
            result["data"] = [n for n in result["data"] if matches(n, filters)]
        return result

    def _remote_get(self, item_id):
        return self.remote.get_notice_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.create_notice(data, teacher_id)

    def _remote_update(self, item_id, partial):
        return self.remote.update_notice(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_notice(item_id)

    def _prepare_new(self, data):
        total = data.get("total")
        if total is None:
            total = len(data.get("recipients") or [])
        return {"readBy": [], **data, "confirmed": 0, "total": total}

    def get_recent(self, limit=RECENT_LIMIT):
        self._log("get_recent", limit)
        return self.get_all(limit=limit)

    def confirm(self, notice_id, reader_id=None):
        self._log("confirm", notice_id, reader_id)
        self._unwrap("confirm", self.remote.mark_notice_as_read(notice_id, reader_id))
        return self.get_by_id(notice_id)

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._data("get_by_student_id", self.remote.get_notices_for_student(student_id))

    def subscribe(self, callback):
        return self.remote.subscribe_to_notices(self._teacher_id(), callback)
