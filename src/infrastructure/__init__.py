"""Infrastructure layer for data persistence.

This package provides the concrete storage the record layer runs against:

- **Database access**: Async SQLAlchemy 2.0+ on PostgreSQL (asyncpg) or
  SQLite (aiosqlite)
- **Repository pattern**: Generic insert/lookup/bulk-delete operations
- **Record store**: The persistence adapter that validates candidate records
  and stores them, reporting unique index conflicts as duplicate keys
"""
