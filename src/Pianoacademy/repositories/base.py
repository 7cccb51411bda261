"""
Shared plumbing for the per-mode repositories.

Every entity has one class per backend (mock dataset, REST API, Firestore),
all raising :mod:`Pianoacademy.errors` exceptions on failure and returning
plain dicts/lists on success.
"""
import copy
import time
import logging
from datetime import datetime

from Pianoacademy.core.formatters import parse_date
from Pianoacademy.core.validators import require_fields
from Pianoacademy.errors import (
    AcademyError,
    AuthRequiredError,
    DEFAULT_ERROR_MESSAGE,
    NotFoundError,
    ServerError,
)
from Pianoacademy.services.endpoints import endpoint
from Pianoacademy.services.subscription import Subscription

logger = logging.getLogger(__name__)

# API methods addressing one resource by id; a 404 there means the record is gone
SINGLE_RESOURCE_METHODS = (
    "get_by_id", "update", "update_song", "delete",
    "mark_as_read", "mark_as_paid", "confirm", "approve", "reject",
)

def now_iso() -> str:
    return datetime.now().isoformat(timespec="milliseconds")


def matches(item, filters) -> bool:
    """Equality match on every non-None filter value."""
    return all(item.get(key) == value for key, value in filters.items() if value is not None)


def in_date_range(value, start, end) -> bool:
    d, start, end = parse_date(value), parse_date(start), parse_date(end)
    if d is None:
        return False
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


def sort_desc(items, field):
    return sorted(items, key=lambda item: str(item.get(field) or ""), reverse=True)


class RepositoryBase:
    name = "Repository"
    not_found_message = "데이터를 찾을 수 없습니다"
    required_fields = ()

    def __init__(self, config):
        self.config = config

    def _log(self, method, *args):
        if self.config.log_repository_calls:
            logger.info("[%s.%s] %s", self.name, method, " ".join(repr(a) for a in args))

    def _log_error(self, method, error):
        if self.config.log_api_errors:
            logger.error("[%s.%s] API Error: %s", self.name, method, error)

    def validate_new(self, data):
        require_fields(data, *self.required_fields)

    def subscribe(self, callback):
        """Realtime feed; only the Firestore backend has one."""
        return Subscription.closed_handle(f"{self.name}.subscribe")


# --- mock ---

class MockRepository(RepositoryBase):
    collection_name = None

    def __init__(self, config, dataset):
        super().__init__(config)
        self.dataset = dataset

    def _delay(self):
        if self.config.mock_network_delay > 0:
            time.sleep(self.config.mock_network_delay)

    def _items(self):
        return self.dataset.collection(self.collection_name)

    def _list(self, predicate=None):
        return [copy.deepcopy(item) for item in self._items() if predicate is None or predicate(item)]

    def _index(self, item_id):
        index = self.dataset.find_index(self.collection_name, item_id)
        if index == -1:
            raise NotFoundError(self.not_found_message)
        return index

    def _insert(self, data, front=False, **defaults):
        item = {**defaults, **copy.deepcopy(data)}
        item["id"] = self.dataset.new_id()
        item.setdefault("createdAt", now_iso())
        if front:
            self._items().insert(0, item)
        else:
            self._items().append(item)
        return copy.deepcopy(item)

    def _patch(self, item_id, partial):
        index = self._index(item_id)
        items = self._items()
        items[index] = {**items[index], **copy.deepcopy(partial), "id": items[index]["id"], "updatedAt": now_iso()}
        return copy.deepcopy(items[index])

    def _remove(self, item_id):
        index = self._index(item_id)
        del self._items()[index]
        return {"success": True}


class MockCrudRepository(MockRepository):
    insert_front = False

    def get_all(self, **filters):
        self._log("get_all", filters)
        self._delay()
        return self._list(lambda item: matches(item, filters))

    def get_by_id(self, item_id):
        self._log("get_by_id", item_id)
        self._delay()
        return copy.deepcopy(self._items()[self._index(item_id)])

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        self._delay()
        return self._insert(data, front=self.insert_front)

    def update(self, item_id, partial):
        self._log("update", item_id, partial)
        self._delay()
        return self._patch(item_id, partial)

    def delete(self, item_id):
        self._log("delete", item_id)
        self._delay()
        return self._remove(item_id)


# --- REST API ---

class ApiRepository(RepositoryBase):
    group = None

    def __init__(self, config, client):
        super().__init__(config)
        self.client = client

    def _path(self, name, **ids):
        return endpoint(self.group, name, **ids)

    def _call(self, method, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ServerError as e:
            self._log_error(method, e)
            if e.status_code == 404 and method in SINGLE_RESOURCE_METHODS:
                raise NotFoundError(self.not_found_message) from e
            raise
        except AcademyError as e:
            self._log_error(method, e)
            raise

    @staticmethod
    def _params(filters):
        params = {k: v for k, v in filters.items() if v is not None}
        return params or None


class ApiCrudRepository(ApiRepository):

    def get_all(self, **filters):
        self._log("get_all", filters)
        return self._call("get_all", self.client.get, self._path("list"), params=self._params(filters))

    def get_by_id(self, item_id):
        self._log("get_by_id", item_id)
        return self._call("get_by_id", self.client.get, self._path("detail", id=item_id))

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        return self._call("create", self.client.post, self._path("create"), json=data)

    def update(self, item_id, partial):
        self._log("update", item_id, partial)
        return self._call("update", self.client.put, self._path("update", id=item_id), json=partial)

    def delete(self, item_id):
        self._log("delete", item_id)
        self._call("delete", self.client.delete, self._path("delete", id=item_id))
        return {"success": True}


# --- Firestore ---

class FirebaseRepository(RepositoryBase):

    def __init__(self, config, remote, current_user=None):
        super().__init__(config)
        self.remote = remote
        self.current_user = current_user

    def _teacher_id(self):
        uid = self.current_user() if self.current_user else None
        if not uid:
            raise AuthRequiredError()
        return uid

    def _unwrap(self, method, result):
        if result.get("success"):
            return result
        if result.get("notFound"):
            raise NotFoundError(self.not_found_message)
        error = ServerError(result.get("error") or DEFAULT_ERROR_MESSAGE, payload=result)
        self._log_error(method, error)
        raise error

    def _data(self, method, result):
        return self._unwrap(method, result).get("data")


class FirebaseCrudRepository(FirebaseRepository):
    """CRUD over the per-entity hooks ``_remote_*`` of subclasses."""

    def _remote_list(self, teacher_id, **filters):
        raise NotImplementedError

    def _remote_get(self, item_id):
        raise NotImplementedError

    def _remote_add(self, data, teacher_id):
        raise NotImplementedError

    def _remote_update(self, item_id, partial):
        raise NotImplementedError

    def _remote_delete(self, item_id):
        raise NotImplementedError

    def _prepare_new(self, data):
        return dict(data)

    def get_all(self, **filters):
        self._log("get_all", filters)
        return self._data("get_all", self._remote_list(self._teacher_id(), **filters))

    def get_by_id(self, item_id):
        self._log("get_by_id", item_id)
        return self._data("get_by_id", self._remote_get(item_id))

    def create(self, data):
        self._log("create", data)
        self.validate_new(data)
        teacher_id = self._teacher_id()
        payload = self._prepare_new(data)
        result = self._unwrap("create", self._remote_add(payload, teacher_id))
        return {**payload, "id": result["id"], "teacherId": teacher_id}

    def update(self, item_id, partial):
        self._log("update", item_id, partial)
        self._unwrap("update", self._remote_update(item_id, partial))
        return self.get_by_id(item_id)

    def delete(self, item_id):
        self._log("delete", item_id)
        self._unwrap("delete", self._remote_delete(item_id))
        return {"success": True}
