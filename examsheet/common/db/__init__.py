"""
Database connection settings.

Resolves the connection URL the engine in ``examsheet.database.init_db`` is
created from.
"""

from examsheet.common.db.connection import (
    get_database_settings,
    is_sqlite_url,
)

__all__ = [
    'get_database_settings',
    'is_sqlite_url',
]
