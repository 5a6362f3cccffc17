"""Capability contracts consumed by the collection domain.

Infrastructure supplies implementations; the domain only depends on these
narrow protocols.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from postcollections.domain.entities.collection import Collection


class SlugUniquenessChecker(Protocol):
    """Reports whether a slug is free for use by a collection."""

    async def is_unique_slug(self, slug: str) -> bool: ...


class FilterEvaluator(Protocol):
    """Decides whether a post's attributes satisfy a filter expression."""

    def matches(self, expression: str, attributes: Any) -> bool: ...


class CollectionRepositoryProtocol(SlugUniquenessChecker, Protocol):
    """Storage for collections, also answering slug uniqueness."""

    async def get_by_id(self, collection_id: str) -> "Collection | None": ...

    async def get_by_slug(self, slug: str) -> "Collection | None": ...

    async def save(self, collection: "Collection") -> None: ...
