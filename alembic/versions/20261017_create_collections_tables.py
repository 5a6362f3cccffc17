"""create collections tables

Revision ID: 5a1f0c3e9b27
Revises:
Create Date: 2026-10-17 09:12:44.118302

"""
from collections.abc import Sequence

# revision identifiers, used by Alembic.
revision: str = '5a1f0c3e9b27'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


import sqlalchemy as sa
from alembic import op


def upgrade() -> None:
    op.create_table(
        'collections',
        sa.Column('id', sa.String(length=24), nullable=False, comment='Collection ID (ObjectId)'),
        sa.Column('title', sa.String(length=191), nullable=False),
        sa.Column('slug', sa.String(length=191), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False, comment='Membership mode: manual or automatic'),
        sa.Column('filter', sa.Text(), nullable=True, comment='Filter expression selecting posts for automatic collections'),
        sa.Column('feature_image', sa.String(length=2000), nullable=True),
        sa.Column('deletable', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_collections_slug'), 'collections', ['slug'], unique=True)

    op.create_table(
        'collections_posts',
        sa.Column('collection_id', sa.String(length=24), nullable=False, comment='Foreign key to collections table'),
        sa.Column('post_id', sa.String(length=24), nullable=False, comment='ID of the post'),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('collection_id', 'post_id'),
    )


def downgrade() -> None:
    op.drop_table('collections_posts')
    op.drop_index(op.f('ix_collections_slug'), table_name='collections')
    op.drop_table('collections')
