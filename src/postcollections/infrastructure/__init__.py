"""Infrastructure layer - storage adapters.

This layer implements the capability contracts declared in
``postcollections.domain.ports`` on top of SQLAlchemy.
"""

from postcollections.infrastructure.persistence.database import (
    Base,
    DatabaseManager,
    close_database,
    get_db_manager,
    init_database,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db_manager",
    "init_database",
    "close_database",
]
