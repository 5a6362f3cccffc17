"""Persistence repositories for database operations."""

from postcollections.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)

__all__ = [
    "CollectionRepository",
]
