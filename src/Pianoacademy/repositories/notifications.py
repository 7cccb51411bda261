from Pianoacademy.repositories.base import (
    ApiRepository,
    FirebaseRepository,
    MockRepository,
    now_iso,
    sort_desc,
)


class NotificationRules:
    name = "NotificationRepository"
    collection_name = "notifications"
    group = "notifications"
    not_found_message = "알림을 찾을 수 없습니다"
    required_fields = ("type", "title")


class MockNotificationRepository(NotificationRules, MockRepository):

    def get_all(self, is_read=None, limit=None):
        self._log("get_all", is_read, limit)
        self._delay()
        items = sort_desc(self._list(lambda n: is_read is None or n.get("isRead") == is_read), "timestamp")
        return items[:limit] if limit else items

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        self._delay()
        return self._insert({**data, "isRead": False}, front=True, timestamp=now_iso())

    def mark_as_read(self, notification_id):
        self._log("mark_as_read", notification_id)
        self._delay()
        return self._patch(notification_id, {"isRead": True, "readAt": now_iso()})

    def mark_all_as_read(self):
        self._log("mark_all_as_read")
        self._delay()
        count = 0
        stamp = now_iso()
        for item in self._items():
            if not item.get("isRead"):
                item.update({"isRead": True, "readAt": stamp})
                count += 1
        return {"success": True, "count": count}

    def delete(self, notification_id):
        self._log("delete", notification_id)
        self._delay()
        return self._remove(notification_id)


class ApiNotificationRepository(NotificationRules, ApiRepository):

    def get_all(self, is_read=None, limit=None):
        self._log("get_all", is_read, limit)
        params = self._params({"isRead": None if is_read is None else str(is_read).lower(), "limit": limit})
        return self._call("get_all", self.client.get, self._path("list"), params=params)

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        return self._call("create", self.client.post, self._path("create"), json=data)

    def mark_as_read(self, notification_id):
        self._log("mark_as_read", notification_id)
        return self._call("mark_as_read", self.client.put, self._path("read", id=notification_id))

    def mark_all_as_read(self):
        self._log("mark_all_as_read")
        return self._call("mark_all_as_read", self.client.put, self._path("read_all")) or {"success": True}

    def delete(self, notification_id):
        self._log("delete", notification_id)
        self._call("delete", self.client.delete, self._path("delete", id=notification_id))
        return {"success": True}


class FirebaseNotificationRepository(NotificationRules, FirebaseRepository):

    def get_all(self, is_read=None, limit=None):
        self._log("get_all", is_read, limit)
        return self._data("get_all", self.remote.get_notifications(self._teacher_id(), is_read=is_read, limit=limit))

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        teacher_id = self._teacher_id()
        result = self._unwrap("create", self.remote.add_notification(data, teacher_id))
        return {**data, "id": result["id"], "teacherId": teacher_id, "isRead": False, "timestamp": now_iso()}

    def mark_as_read(self, notification_id):
        self._log("mark_as_read", notification_id)
        self._unwrap("mark_as_read", self.remote.mark_notification_as_read(notification_id))
        return {"id": notification_id, "isRead": True}

    def mark_all_as_read(self):
        self._log("mark_all_as_read")
        return self._unwrap("mark_all_as_read", self.remote.mark_all_notifications_as_read(self._teacher_id()))

    def delete(self, notification_id):
        self._log("delete", notification_id)
        self._unwrap("delete", self.remote.delete_notification(notification_id))
        return {"success": True}

    def subscribe(self, callback):
        return self.remote.subscribe_to_notifications(self._teacher_id(), callback)
