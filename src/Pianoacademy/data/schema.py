import logging
from Pianoacademy.data.db import tx

logger = logging.getLogger(__name__)


def create_tables():
	"""Create the local key/value table used by the storage adapter."""
	with tx() as conn:
		conn.execute("""
			CREATE TABLE IF NOT EXISTS kv_store (
				key TEXT PRIMARY KEY,
				value TEXT NOT NULL,
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
		conn.execute("CREATE INDEX IF NOT EXISTS idx_kv_store_updated ON kv_store(updated_at);")
	logger.debug("kv_store table ready")
