"""
Database module - SQLAlchemy engine, sessions and table definitions.
"""
from placement_hub.db.postgres import get_db_session, init_db, test_db_connection

__all__ = [
    "get_db_session",
    "init_db",
    "test_db_connection",
]
