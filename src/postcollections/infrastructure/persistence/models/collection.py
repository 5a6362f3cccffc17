"""SQLAlchemy models for the collections and collections_posts tables."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from postcollections.infrastructure.persistence.database import Base


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Attributes:
        id: Primary key (24-hex-digit ObjectId string).
        title: Collection title.
        slug: Unique URL slug.
        description: Optional description.
        type: Either 'manual' or 'automatic'.
        filter: Filter expression for automatic collections.
        feature_image: Optional image URL.
        deletable: Whether the collection may be deleted.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        comment="Collection ID (ObjectId)",
    )
    title: Mapped[str] = mapped_column(String(191), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(191),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="manual",
        comment="Membership mode: manual or automatic",
    )
    filter: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Filter expression selecting posts for automatic collections",
    )
    feature_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    deletable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, slug={self.slug})>"


class CollectionPostModel(Base):
    """Junction table holding the ordered posts of each collection.

    Attributes:
        collection_id: Foreign key to collections table.
        post_id: ID of the post in the collection.
        sort_order: Zero-based position of the post.
    """

    __tablename__ = "collections_posts"

    collection_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to collections table",
    )
    post_id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        comment="ID of the post",
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<CollectionPost(collection_id={self.collection_id}, "
            f"post_id={self.post_id}, sort_order={self.sort_order})>"
        )
