"""Domain entities for postcollections.

Entities hold the business rules and have no dependencies on storage or
transport.
"""

from postcollections.domain.entities.collection import Collection, CollectionType

__all__ = [
    "Collection",
    "CollectionType",
]
