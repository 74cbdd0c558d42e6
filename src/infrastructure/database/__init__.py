"""Database infrastructure with async SQLAlchemy and the repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: One table per record kind
- **session**: Async engine and session management
- **repository**: Generic repository with insert, lookup and bulk delete
- **record_store**: Persistence adapter used by callers to store records

All database operations are async-first.
"""

from src.infrastructure.database.base import Base, BaseModel
from src.infrastructure.database.models import (
    RECORD_MODELS,
    Contact,
    Post,
    Request,
    User,
)
from src.infrastructure.database.record_store import RecordStore
from src.infrastructure.database.repository import BaseRepository
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    create_session_factory,
    get_async_session,
    get_engine,
    get_session_factory,
    init_database,
)

__all__ = [
    "RECORD_MODELS",
    "Base",
    "BaseModel",
    "BaseRepository",
    "Contact",
    "Post",
    "RecordStore",
    "Request",
    "User",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_session_factory",
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "init_database",
]
