"""
Database base configuration and utilities.

This module provides the foundation for the master's registry using
Peewee ORM with SQLite backend.

Components:
    - db: Global SQLite database instance
    - BaseModel: Base class for all wgmesh database models
    - initialize_database: Database setup function
    - close_database: Connection teardown
"""

import os

import peewee

from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Database Instance
# =============================================================================

# Global database instance - path set via initialize_database()
db = peewee.SqliteDatabase(None)


# =============================================================================
# Base Model
# =============================================================================


class BaseModel(peewee.Model):
    """
    Base model for all wgmesh database models.

    All models inherit from this class to share the database connection.
    """

    class Meta:
        database = db


# =============================================================================
# Database Lifecycle
# =============================================================================


def initialize_database(db_path: str) -> None:
    """
    Connect to the database and create tables.

    The parent directory is created with mode 0755 when missing.

    Args:
        db_path: Path to the SQLite database file.

    Raises:
        peewee.OperationalError: If database connection fails.
    """
    # Import models here to avoid circular imports
    from wgmesh.db.worker import Worker

    logger.debug(f"Initializing database at: {db_path}")

    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, mode=0o755, exist_ok=True)

    try:
        if not db.is_closed():
            db.close()
        db.init(db_path)
        db.connect()
        db.create_tables([Worker], safe=True)

        logger.info(f"Database initialized: {db_path}")
        logger.debug(f"Database contains {Worker.select().count()} workers")

    except peewee.OperationalError as e:
        logger.error(f"Failed to initialize database '{db_path}': {e}")
        raise


def close_database() -> None:
    """Close the database connection if open."""
    if not db.is_closed():
        db.close()
        logger.debug("Database connection closed")
