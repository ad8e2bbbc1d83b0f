"""create_blog_schema

Revision ID: 5c1f0e2a9b7d
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1f0e2a9b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'categories',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'posts',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('cover_image_url', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_posts_created', 'posts', [sa.text('created_at DESC')], unique=False)

    # Join table: one row per (post, category), both sides enforced by FK
    op.create_table(
        'post_categories',
        sa.Column('post_id', sa.Text(), sa.ForeignKey('posts.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('category_id', sa.Text(), sa.ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('idx_post_categories_category', 'post_categories', ['category_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_post_categories_category', table_name='post_categories')
    op.drop_table('post_categories')

    op.drop_index('idx_posts_created', table_name='posts')
    op.drop_table('posts')

    op.drop_table('categories')
