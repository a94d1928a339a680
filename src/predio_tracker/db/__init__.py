from .connection import connect, open_conn, storage_errors
from .init import ensure_schema, init_db

__all__ = ["connect", "ensure_schema", "init_db", "open_conn", "storage_errors"]
