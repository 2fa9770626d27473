"""Database layer for Neonsheet."""

from neonsheet.database.engine import close_db, get_engine, get_session, get_session_factory, init_db

__all__ = ["get_engine", "get_session_factory", "get_session", "init_db", "close_db"]
