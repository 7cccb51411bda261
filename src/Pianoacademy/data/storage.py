"""
Local key/value persistence (auth token, user profile, selected child, cache).

Values are stored as JSON text in the ``kv_store`` table. Every function is
best-effort: failures are logged and reported as ``None``/``False``.
"""
import json
import time
import logging
import sqlite3

from Pianoacademy.config import parse_bool
from Pianoacademy.data.db import tx

logger = logging.getLogger(__name__)

KEY_PREFIX = "@piano_academy"
STORAGE_KEYS = {
	"AUTH_TOKEN": f"{KEY_PREFIX}:auth_token",
	"USER_DATA": f"{KEY_PREFIX}:user_data",
	"SELECTED_CHILD": f"{KEY_PREFIX}:selected_child",
	"CACHED_DATA": f"{KEY_PREFIX}:cached_data",
}
DEFAULT_CACHE_TTL = 3600  # seconds

_STORAGE_ERRORS = (sqlite3.Error, TypeError, ValueError)


def get(key, default=None):
	try:
		with tx() as conn:
			row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
		return json.loads(row[0]) if row else default
	except _STORAGE_ERRORS as e:
		logger.error("Storage get failed for %s: %s", key, e)
		return default


def set(key, value) -> bool:
	try:
		payload = json.dumps(value, ensure_ascii=False)
		with tx() as conn:
			conn.execute(
				"REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now','localtime'))",
				(key, payload),
			)
		return True
	except _STORAGE_ERRORS as e:
		logger.error("Storage set failed for %s: %s", key, e)
		return False


def remove(key) -> bool:
	try:
		with tx() as conn:
			conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
		return True
	except _STORAGE_ERRORS as e:
		logger.error("Storage remove failed for %s: %s", key, e)
		return False


def _remove_prefix(prefix) -> bool:
	try:
		with tx() as conn:
			conn.execute("DELETE FROM kv_store WHERE key LIKE ?", (prefix + "%",))
		return True
	except _STORAGE_ERRORS as e:
		logger.error("Storage clear failed for %s*: %s", prefix, e)
		return False


# --- Boolean helpers (store as true/false) ---

def get_bool(key, default: bool = False) -> bool:
	return parse_bool(get(key, None), default)


def set_bool(key, value: bool) -> bool:
	return set(key, bool(value))


# --- Auth / session ---

def get_auth_token():
	return get(STORAGE_KEYS["AUTH_TOKEN"])


def set_auth_token(token) -> bool:
	return set(STORAGE_KEYS["AUTH_TOKEN"], token)


def remove_auth_token() -> bool:
	return remove(STORAGE_KEYS["AUTH_TOKEN"])


def get_user_data():
	return get(STORAGE_KEYS["USER_DATA"])


def set_user_data(user) -> bool:
	return set(STORAGE_KEYS["USER_DATA"], user)


def remove_user_data() -> bool:
	return remove(STORAGE_KEYS["USER_DATA"])


def get_selected_child():
	return get(STORAGE_KEYS["SELECTED_CHILD"])


def set_selected_child(child_id) -> bool:
	return set(STORAGE_KEYS["SELECTED_CHILD"], child_id)


# --- Cache ---

def _cache_key(key):
	return f"{STORAGE_KEYS['CACHED_DATA']}:{key}"


def set_cached_data(key, data, ttl=DEFAULT_CACHE_TTL, now=None) -> bool:
	entry = {
		"data": data,
		"timestamp": time.time() if now is None else now,
		"ttl": ttl,
	}
	return set(_cache_key(key), entry)


def get_cached_data(key):
	"""Return the raw ``{data, timestamp, ttl}`` entry or None."""
	return get(_cache_key(key))


def is_cache_valid(key, now=None) -> bool:
	entry = get_cached_data(key)
	if not entry:
		return False
	now = time.time() if now is None else now
	return now - entry.get("timestamp", 0) < entry.get("ttl", DEFAULT_CACHE_TTL)


def clear_cache() -> bool:
	return _remove_prefix(STORAGE_KEYS["CACHED_DATA"] + ":")


def clear_all_data() -> bool:
	"""Wipe every namespaced key (sign-out)."""
	return _remove_prefix(KEY_PREFIX + ":")
