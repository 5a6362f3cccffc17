"""Repository for collection persistence.

Maps Collection entities to the collections table and their ordered posts
to the collections_posts junction table.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from postcollections.core.logging import get_logger
from postcollections.domain.entities.collection import Collection
from postcollections.domain.ports import FilterEvaluator
from postcollections.infrastructure.persistence.models import (
    CollectionModel,
    CollectionPostModel,
)

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CollectionRepository:
    """Repository for collection database operations.

    Also serves as the slug uniqueness checker for collection entities.
    """

    def __init__(
        self,
        session: AsyncSession,
        filter_evaluator: FilterEvaluator | None = None,
    ) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
            filter_evaluator: Evaluator handed to loaded collections.
        """
        self.session = session
        self.filter_evaluator = filter_evaluator

    async def get_by_id(self, collection_id: str) -> Collection | None:
        """Get a collection by ID.

        Args:
            collection_id: The collection ID.

        Returns:
            The collection if found, None otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel).where(CollectionModel.id == collection_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return await self._to_entity(model)

    async def get_by_slug(self, slug: str) -> Collection | None:
        """Get a collection by slug.

        Args:
            slug: The collection slug.

        Returns:
            The collection if found, None otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel).where(CollectionModel.slug == slug)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return await self._to_entity(model)

    async def is_unique_slug(self, slug: str) -> bool:
        """Check that no stored collection uses the slug.

        Args:
            slug: The slug to check.

        Returns:
            True if the slug is free, False otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel.id).where(CollectionModel.slug == slug).limit(1)
        )
        return result.scalar_one_or_none() is None

    async def save(self, collection: Collection) -> None:
        """Insert or update a collection and rewrite its ordered posts.

        A collection marked deleted is removed instead.

        Args:
            collection: The collection to persist.
        """
        if collection.deleted:
            await self.delete(collection.id)
            return

        record = collection.to_record()
        post_ids = record.pop("posts")

        model = await self.session.get(CollectionModel, collection.id)
        if model is None:
            self.session.add(CollectionModel(**record))
        else:
            for key, value in record.items():
                setattr(model, key, value)
        await self.session.flush()

        await self.session.execute(
            delete(CollectionPostModel).where(
                CollectionPostModel.collection_id == collection.id
            )
        )
        self.session.add_all(
            [
                CollectionPostModel(
                    collection_id=collection.id,
                    post_id=post_id,
                    sort_order=index,
                )
                for index, post_id in enumerate(post_ids)
            ]
        )
        await self.session.flush()
        logger.debug(
            "Collection saved",
            collection_id=collection.id,
            post_count=len(post_ids),
        )

    async def delete(self, collection_id: str) -> bool:
        """Delete a collection and its post memberships.

        Args:
            collection_id: The collection ID.

        Returns:
            True if a collection row was removed.
        """
        await self.session.execute(
            delete(CollectionPostModel).where(
                CollectionPostModel.collection_id == collection_id
            )
        )
        result = await self.session.execute(
            delete(CollectionModel).where(CollectionModel.id == collection_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def _get_post_ids(self, collection_id: str) -> list[str]:
        result = await self.session.execute(
            select(CollectionPostModel.post_id)
            .where(CollectionPostModel.collection_id == collection_id)
            .order_by(CollectionPostModel.sort_order)
        )
        return list(result.scalars().all())

    async def _to_entity(self, model: CollectionModel) -> Collection:
        return await Collection.create(
            {
                "id": model.id,
                "title": model.title,
                "slug": model.slug,
                "description": model.description,
                "type": model.type,
                "filter": model.filter,
                "feature_image": model.feature_image,
                "deletable": model.deletable,
                "posts": await self._get_post_ids(model.id),
                "created_at": _as_utc(model.created_at),
                "updated_at": _as_utc(model.updated_at),
            },
            self,
            filter_evaluator=self.filter_evaluator,
        )
