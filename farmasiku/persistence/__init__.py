from .base import PersistenceService, PersistenceError
from .sql import SqlPersistenceService, db_session, init_db

__all__ = [
    "PersistenceService",
    "PersistenceError",
    "SqlPersistenceService",
    "db_session",
    "init_db",
]
