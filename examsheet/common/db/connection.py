"""
Database Configuration Loading

This module resolves the database connection URL from environment variables.
A complete ``DATABASE_URL`` wins; otherwise the URL is assembled from the
discrete ``DB_*`` variables.
"""

import os
import urllib.parse
from typing import Dict, Any

from examsheet.common.logger import app_logger

logger = app_logger.getChild("db.config")

# Environment variable names
DB_TYPE_ENV = "DB_TYPE"  # postgresql or sqlite
DB_HOST_ENV = "DB_HOST"
DB_PORT_ENV = "DB_PORT"
DB_NAME_ENV = "DB_NAME"
DB_USER_ENV = "DB_USER"
DB_PASSWORD_ENV = "DB_PASSWORD"
DB_PATH_ENV = "DB_PATH"  # For SQLite
DB_URL_ENV = "DATABASE_URL"
DB_POOL_SIZE_ENV = "DB_POOL_SIZE"

# Default values
DEFAULT_DB_TYPE = "postgresql"
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 5432
DEFAULT_DB_NAME = "examsheet"
DEFAULT_DB_USER = "examsheet"
DEFAULT_DB_PASSWORD = "password"
DEFAULT_DB_PATH = "./examsheet.db"
DEFAULT_DB_POOL_SIZE = 5


def get_database_settings() -> Dict[str, Any]:
    """
    Load database connection settings from environment variables.

    Returns:
        A dictionary with ``database_url``, ``db_type`` and ``pool_size``.

    Raises:
        ValueError: If ``DB_TYPE`` names an unsupported database
    """
    settings: Dict[str, Any] = {
        "pool_size": int(os.environ.get(DB_POOL_SIZE_ENV, DEFAULT_DB_POOL_SIZE)),
    }

    database_url = os.environ.get(DB_URL_ENV)
    if database_url:
        logger.info("Using direct DATABASE_URL from environment variable.")
        settings["database_url"] = database_url
        settings["db_type"] = database_url.split("+", 1)[0].split(":", 1)[0]
        return settings

    db_type = os.environ.get(DB_TYPE_ENV, DEFAULT_DB_TYPE).lower()
    settings["db_type"] = db_type

    if db_type == "postgresql":
        user = os.environ.get(DB_USER_ENV, DEFAULT_DB_USER)
        password = urllib.parse.quote_plus(os.environ.get(DB_PASSWORD_ENV, DEFAULT_DB_PASSWORD))
        host = os.environ.get(DB_HOST_ENV, DEFAULT_DB_HOST)
        port = int(os.environ.get(DB_PORT_ENV, DEFAULT_DB_PORT))
        database = os.environ.get(DB_NAME_ENV, DEFAULT_DB_NAME)
        settings["database_url"] = f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{database}"
    elif db_type == "sqlite":
        db_path = os.environ.get(DB_PATH_ENV, DEFAULT_DB_PATH)
        settings["database_url"] = f"sqlite+aiosqlite:///{db_path}"
    else:
        logger.error(f"Unsupported DB_TYPE: {db_type}")
        raise ValueError(f"Unsupported database type: {db_type}")

    logger.info(f"Constructed database URL for {db_type}")
    return settings


def is_sqlite_url(database_url: str) -> bool:
    """Whether the URL targets SQLite (which takes no pool sizing options)."""
    return database_url.startswith("sqlite")
