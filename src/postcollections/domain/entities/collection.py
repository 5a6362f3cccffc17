"""Collection entity for ordered groups of posts.

A collection is either manual, where editors place posts by hand, or
automatic, where a filter expression decides which posts belong to it.
Collections are built through ``Collection.create`` which validates the
incoming field bag, and are afterwards changed only through their own
operations.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from bson import ObjectId
from pydantic import TypeAdapter, ValidationError

from postcollections.core.filters import FilterError, FilterExpressionEvaluator
from postcollections.domain.exceptions import (
    InvalidCollectionTypeError,
    InvalidDateError,
    InvalidFilterError,
    InvalidIdentifierError,
    MissingRequiredFieldError,
    SlugNotUniqueError,
)
from postcollections.domain.ports import FilterEvaluator, SlugUniquenessChecker
from postcollections.domain.services.slug_generator import SlugGenerator

INVALID_ID_MESSAGE = "Invalid ID provided for Collection"
INVALID_FILTER_MESSAGE = "Invalid filter provided for automatic Collection"
INVALID_FILTER_CONTEXT = "Automatic type of collection should always have a filter value"

_datetime_adapter = TypeAdapter(datetime)


class CollectionType(str, Enum):
    """How a collection decides its membership."""

    MANUAL = "manual"
    AUTOMATIC = "automatic"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among the given keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _parse_id(value: Any) -> str:
    if value is None or value == "":
        return str(ObjectId())
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, str) and ObjectId.is_valid(value):
        return str(ObjectId(value))
    raise InvalidIdentifierError(INVALID_ID_MESSAGE)


def _parse_date(value: Any, field_name: str) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime; naive values are UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        try:
            value = _datetime_adapter.validate_python(value)
        except ValidationError:
            raise InvalidDateError(f"Invalid date provided for {field_name}") from None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_type(value: Any) -> CollectionType:
    if value is None:
        return CollectionType.MANUAL
    try:
        return CollectionType(value)
    except ValueError:
        raise InvalidCollectionTypeError(
            "Invalid type provided for Collection",
            context=f"Collection type must be one of: {', '.join(t.value for t in CollectionType)}",
        ) from None


def _validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise MissingRequiredFieldError("Collection title is required")
    return title


def _validate_filter(collection_type: CollectionType, filter_expression: str | None) -> None:
    if collection_type is CollectionType.AUTOMATIC and not filter_expression:
        raise InvalidFilterError(INVALID_FILTER_MESSAGE, context=INVALID_FILTER_CONTEXT)


def post_id_of(post: Any) -> str:
    """Extract a post's identifier from an id, a mapping or an object."""
    if isinstance(post, (str, ObjectId)):
        return str(post)
    post_id = post.get("id") if isinstance(post, Mapping) else getattr(post, "id", None)
    if post_id is None:
        raise ValueError("Post must carry an id")
    return str(post_id)


def _unique_post_ids(posts: Iterable[Any]) -> list[str]:
    post_ids: list[str] = []
    for post in posts:
        post_id = post_id_of(post)
        if post_id not in post_ids:
            post_ids.append(post_id)
    return post_ids


class Collection:
    """Ordered collection of posts, either manual or automatic.

    Attributes are exposed read-only; use ``set_slug``, ``edit``,
    ``add_post``, ``remove_post`` and the ``deleted`` setter to change them.
    ``updated_at`` is refreshed by every change that takes effect.
    """

    def __init__(
        self,
        *,
        id: str,
        title: str,
        slug: str,
        description: str | None,
        type: CollectionType,
        filter: str | None,
        feature_image: str | None,
        posts: list[str],
        deletable: bool,
        deleted: bool,
        created_at: datetime,
        updated_at: datetime,
        filter_evaluator: FilterEvaluator,
    ) -> None:
        """Assemble an already validated collection; use ``create`` instead."""
        self._id = id
        self._title = title
        self._slug = slug
        self._description = description
        self._type = type
        self._filter = filter
        self._feature_image = feature_image
        self._posts = posts
        self._deletable = deletable
        self._deleted = deleted
        self._created_at = created_at
        self._updated_at = updated_at
        self._filter_evaluator = filter_evaluator

    @classmethod
    async def create(
        cls,
        data: Mapping[str, Any],
        unique_checker: SlugUniquenessChecker,
        *,
        filter_evaluator: FilterEvaluator | None = None,
        check_slug_uniqueness: bool = False,
        slug_fallback: str = "collection",
    ) -> "Collection":
        """Validate a field bag and build a collection from it.

        Checks run in order and stop at the first failure: title, id,
        created_at/updated_at, type, then the automatic filter rule.

        Args:
            data: Any subset of the collection fields. Storage names
                (``feature_image``, ``created_at``, ``updated_at``) and their
                camelCase forms are both accepted.
            unique_checker: Consulted for the resolved slug only when
                ``check_slug_uniqueness`` is set.
            filter_evaluator: Evaluator for automatic membership. Defaults
                to ``FilterExpressionEvaluator``.
            check_slug_uniqueness: Reject slugs already used by another
                collection at creation time.
            slug_fallback: Slug used when the title yields no slug characters.

        Returns:
            The new collection.

        Raises:
            CollectionValidationError: If any field is invalid.
            SlugNotUniqueError: If the slug check is enabled and fails.
        """
        title = _validate_title(data.get("title"))
        collection_id = _parse_id(data.get("id"))
        created_at = _parse_date(_pick(data, "created_at", "createdAt"), "created_at")
        updated_at = _parse_date(_pick(data, "updated_at", "updatedAt"), "updated_at")
        collection_type = _parse_type(data.get("type"))
        filter_expression = data.get("filter")
        _validate_filter(collection_type, filter_expression)

        slug = data.get("slug") or SlugGenerator.generate(title, fallback=slug_fallback)
        if check_slug_uniqueness:
            await cls._ensure_unique_slug(slug, unique_checker)

        deletable = _pick(data, "deletable")
        deletable = True if deletable is None else bool(deletable)

        now = _utcnow()
        return cls(
            id=collection_id,
            title=title,
            slug=slug,
            description=data.get("description"),
            type=collection_type,
            filter=filter_expression,
            feature_image=_pick(data, "feature_image", "featureImage"),
            posts=_unique_post_ids(data.get("posts") or []),
            deletable=deletable,
            deleted=bool(data.get("deleted")) and deletable,
            created_at=created_at or now,
            updated_at=updated_at or now,
            filter_evaluator=filter_evaluator or FilterExpressionEvaluator(),
        )

    # =========================================================================
    # Read-only attributes
    # =========================================================================

    @property
    def id(self) -> str:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def slug(self) -> str:
        return self._slug

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def type(self) -> CollectionType:
        return self._type

    @property
    def filter(self) -> str | None:
        return self._filter

    @property
    def feature_image(self) -> str | None:
        return self._feature_image

    @property
    def posts(self) -> list[str]:
        """Post IDs in collection order (a copy)."""
        return list(self._posts)

    @property
    def deletable(self) -> bool:
        return self._deletable

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def deleted(self) -> bool:
        return self._deleted

    @deleted.setter
    def deleted(self, value: bool) -> None:
        """Mark the collection deleted.

        Ignored for non-deletable collections; a deleted collection cannot
        be restored.
        """
        if value and self._deletable and not self._deleted:
            self._deleted = True
            self._touch()

    # =========================================================================
    # Mutations
    # =========================================================================

    async def set_slug(self, slug: str, unique_checker: SlugUniquenessChecker) -> None:
        """Change the slug after checking it is not taken.

        The checker is not consulted when the slug is unchanged.

        Raises:
            MissingRequiredFieldError: If the slug is empty.
            SlugNotUniqueError: If another collection already uses the slug.
        """
        if slug == self._slug:
            return

        if not slug:
            raise MissingRequiredFieldError("Collection slug cannot be empty")

        await self._ensure_unique_slug(slug, unique_checker)
        self._slug = slug
        self._touch()

    async def edit(self, data: Mapping[str, Any], unique_checker: SlugUniquenessChecker) -> None:
        """Apply a partial update of the editable fields.

        The resulting state is validated as a whole before anything is
        committed, so a failed edit leaves the collection untouched.

        Args:
            data: Any of title, description, filter, type, feature_image
                (or featureImage) and slug. Other keys are ignored. An empty
                or None slug keeps the current one.
            unique_checker: Consulted when the slug changes.

        Raises:
            CollectionValidationError: If the edited state is invalid.
            SlugNotUniqueError: If the new slug is taken.
        """
        title = _validate_title(data["title"]) if "title" in data else self._title
        description = data["description"] if "description" in data else self._description
        collection_type = _parse_type(data["type"]) if "type" in data else self._type
        filter_expression = data["filter"] if "filter" in data else self._filter

        if "feature_image" in data:
            feature_image = data["feature_image"]
        elif "featureImage" in data:
            feature_image = data["featureImage"]
        else:
            feature_image = self._feature_image

        _validate_filter(collection_type, filter_expression)

        slug = data.get("slug")
        if slug and slug != self._slug:
            await self._ensure_unique_slug(slug, unique_checker)
        else:
            slug = self._slug

        self._title = title
        self._description = description
        self._type = collection_type
        self._filter = filter_expression
        self._feature_image = feature_image
        self._slug = slug
        self._touch()

    def add_post(self, post: Any, position: int | None = None) -> bool:
        """Add a post to the collection.

        Automatic collections accept the post only when it matches the
        filter and ignore ``position``. Manual collections always accept it,
        moving it if already present: ``None`` appends, a non-negative
        position inserts at that index and a negative one counts from the
        end, both clamped to the list bounds.

        Args:
            post: Post mapping or object with an ``id`` plus the attributes
                the filter inspects.
            position: Insertion index for manual collections.

        Returns:
            True if the post is now in the collection, False otherwise.
        """
        post_id = post_id_of(post)

        if self._type is CollectionType.AUTOMATIC:
            if not self.post_matches_filter(post):
                return False
            if post_id not in self._posts:
                self._posts.append(post_id)
                self._touch()
            return True

        if post_id in self._posts:
            self._posts.remove(post_id)

        length = len(self._posts)
        if position is None:
            index = length
        elif position >= 0:
            index = min(position, length)
        else:
            index = max(length + position, 0)

        self._posts.insert(index, post_id)
        self._touch()
        return True

    def remove_post(self, post_id: str) -> None:
        """Remove a post by ID; absent IDs are ignored."""
        post_id = str(post_id)
        if post_id in self._posts:
            self._posts.remove(post_id)
            self._touch()

    def post_matches_filter(self, post: Any) -> bool:
        """Check a post against the collection filter.

        A collection without a filter matches every post. A stored filter
        the built-in language cannot parse matches none.
        """
        if not self._filter:
            return True
        try:
            return bool(self._filter_evaluator.matches(self._filter, post))
        except FilterError:
            return False

    def bind_filter_evaluator(self, filter_evaluator: FilterEvaluator) -> None:
        """Evaluate the filter with another evaluator from now on.

        Used by owners that load collections from storage and hold the
        evaluator their filters were written for.
        """
        self._filter_evaluator = filter_evaluator

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_json(self) -> dict[str, Any]:
        """Serialize to the public JSON shape; posts are reduced to their IDs."""
        return {
            "id": self._id,
            "title": self._title,
            "slug": self._slug,
            "description": self._description,
            "type": self._type.value,
            "filter": self._filter,
            "featureImage": self._feature_image,
            "createdAt": self._created_at.isoformat(),
            "updatedAt": self._updated_at.isoformat(),
            "posts": [{"id": post_id} for post_id in self._posts],
        }

    def to_record(self) -> dict[str, Any]:
        """Serialize to storage field names for persistence."""
        return {
            "id": self._id,
            "title": self._title,
            "slug": self._slug,
            "description": self._description,
            "type": self._type.value,
            "filter": self._filter,
            "feature_image": self._feature_image,
            "deletable": self._deletable,
            "created_at": self._created_at,
            "updated_at": self._updated_at,
            "posts": list(self._posts),
        }

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    async def _ensure_unique_slug(slug: str, unique_checker: SlugUniquenessChecker) -> None:
        if not await unique_checker.is_unique_slug(slug):
            raise SlugNotUniqueError(
                "Collection slug is already in use",
                context=f"Another collection already uses the slug '{slug}'",
            )

    def _touch(self) -> None:
        self._updated_at = _utcnow()

    def __repr__(self) -> str:
        return f"<Collection(id={self._id}, slug={self._slug}, type={self._type.value})>"
