"""SQLAlchemy models for postcollections tables.

All models inherit from the Base class defined in database.py.
"""

from postcollections.infrastructure.persistence.models.collection import (
    CollectionModel,
    CollectionPostModel,
)

__all__ = [
    "CollectionModel",
    "CollectionPostModel",
]
