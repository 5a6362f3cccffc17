"""Collection service for business logic.

Loads collections from a repository, applies entity operations and saves
the result, logging each change.
"""

from typing import Any, Mapping

from postcollections.core.config import Settings, get_settings
from postcollections.core.filters import FilterExpressionEvaluator
from postcollections.core.logging import get_logger
from postcollections.domain.entities.collection import Collection
from postcollections.domain.exceptions import CollectionNotFoundError
from postcollections.domain.ports import CollectionRepositoryProtocol, FilterEvaluator

logger = get_logger(__name__)


class CollectionService:
    """Service for collection business logic."""

    def __init__(
        self,
        repository: CollectionRepositoryProtocol,
        filter_evaluator: FilterEvaluator | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Collection storage, also used as slug uniqueness checker.
            filter_evaluator: Evaluator for automatic collections.
            settings: Optional settings; loaded from the environment if omitted.
        """
        self.repository = repository
        self.settings = settings or get_settings()
        self.filter_evaluator = filter_evaluator or FilterExpressionEvaluator(
            cache_size=self.settings.filter_cache_size
        )

    async def create_collection(self, data: Mapping[str, Any]) -> Collection:
        """Create and store a new collection.

        Args:
            data: Collection fields.

        Returns:
            The created collection.

        Raises:
            CollectionValidationError: If the data is invalid.
            SlugNotUniqueError: If slug checks on creation are enabled and fail.
            FilterSyntaxError: If an automatic collection's filter cannot be parsed.
        """
        self._validate_filter_syntax(data)

        collection = await Collection.create(
            data,
            self.repository,
            filter_evaluator=self.filter_evaluator,
            check_slug_uniqueness=self.settings.check_slug_on_create,
            slug_fallback=self.settings.default_slug_fallback,
        )
        await self.repository.save(collection)

        logger.info(
            "Collection created",
            collection_id=collection.id,
            slug=collection.slug,
            type=collection.type.value,
        )
        return collection

    async def get_collection(self, collection_id: str) -> Collection | None:
        """Get a collection by ID."""
        return self._bind(await self.repository.get_by_id(collection_id))

    async def get_collection_by_slug(self, slug: str) -> Collection | None:
        """Get a collection by slug."""
        return self._bind(await self.repository.get_by_slug(slug))

    async def edit_collection(self, collection_id: str, data: Mapping[str, Any]) -> Collection:
        """Apply a partial update to a stored collection.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            CollectionValidationError: If the edited state is invalid.
            SlugNotUniqueError: If the new slug is taken.
            FilterSyntaxError: If a new filter cannot be parsed.
        """
        collection = await self._require(collection_id)
        self._validate_filter_syntax(data)

        await collection.edit(data, self.repository)
        await self.repository.save(collection)

        logger.info(
            "Collection edited",
            collection_id=collection.id,
            fields=sorted(data.keys()),
        )
        return collection

    async def add_post(
        self, collection_id: str, post: Any, position: int | None = None
    ) -> bool:
        """Add a post to a stored collection.

        Returns:
            True if the post is in the collection afterwards.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = await self._require(collection_id)
        added = collection.add_post(post, position)
        if added:
            await self.repository.save(collection)

        logger.info(
            "Post added to collection" if added else "Post did not match collection filter",
            collection_id=collection.id,
            position=position,
            added=added,
        )
        return added

    async def remove_post(self, collection_id: str, post_id: str) -> Collection:
        """Remove a post from a stored collection.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = await self._require(collection_id)
        collection.remove_post(post_id)
        await self.repository.save(collection)

        logger.info("Post removed from collection", collection_id=collection.id, post_id=post_id)
        return collection

    async def delete_collection(self, collection_id: str) -> bool:
        """Delete a collection if it is deletable.

        Returns:
            True if the collection was deleted, False if it is protected.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = await self._require(collection_id)
        collection.deleted = True

        if not collection.deleted:
            logger.warning("Refusing to delete protected collection", collection_id=collection.id)
            return False

        await self.repository.save(collection)
        logger.info("Collection deleted", collection_id=collection.id)
        return True

    async def _require(self, collection_id: str) -> Collection:
        collection = await self.get_collection(collection_id)
        if collection is None:
            raise CollectionNotFoundError(
                "Collection not found",
                context=f"No collection exists with id '{collection_id}'",
            )
        return collection

    def _bind(self, collection: Collection | None) -> Collection | None:
        # Stored filters are evaluated by this service's evaluator
        if collection is not None:
            collection.bind_filter_evaluator(self.filter_evaluator)
        return collection

    def _validate_filter_syntax(self, data: Mapping[str, Any]) -> None:
        # Custom evaluators own their syntax; only the built-in one is checked
        filter_expression = data.get("filter")
        if filter_expression and isinstance(self.filter_evaluator, FilterExpressionEvaluator):
            self.filter_evaluator.validate(filter_expression)
