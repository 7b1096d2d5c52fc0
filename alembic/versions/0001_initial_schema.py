"""Initial schema: users, books, references, reading lists, community, feedback

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=2000), nullable=True),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('github_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_github_id'), 'users', ['github_id'], unique=True)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=500), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_url', sa.String(length=1000), nullable=True),
        sa.Column('references_discovered', sa.Boolean(), nullable=False),
        sa.Column('references_discovered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('added_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['added_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_books_slug'), 'books', ['slug'], unique=True)
    op.create_index(op.f('ix_books_references_discovered'), 'books', ['references_discovered'], unique=False)
    op.create_index(op.f('ix_books_created_at'), 'books', ['created_at'], unique=False)

    op.create_table(
        'book_references',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('source_book_id', sa.Integer(), nullable=False),
        sa.Column('referenced_book_id', sa.Integer(), nullable=False),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('page_number', sa.Integer(), nullable=True),
        sa.Column('source', sa.Enum('USER', 'AI', 'GOOGLE_BOOKS', name='referencesource'), nullable=False),
        sa.Column('source_url', sa.String(length=1000), nullable=True),
        sa.Column('source_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('added_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['source_book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referenced_book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['added_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('source_book_id', 'referenced_book_id', name='uq_book_reference_pair'),
    )
    op.create_index(op.f('ix_book_references_source_book_id'), 'book_references', ['source_book_id'], unique=False)
    op.create_index(op.f('ix_book_references_referenced_book_id'), 'book_references', ['referenced_book_id'], unique=False)
    op.create_index('ix_book_reference_source_created', 'book_references', ['source_book_id', 'created_at'], unique=False)

    op.create_table(
        'reading_lists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('slug', sa.String(length=300), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reading_lists_user_id'), 'reading_lists', ['user_id'], unique=False)
    op.create_index(op.f('ix_reading_lists_slug'), 'reading_lists', ['slug'], unique=True)
    op.create_index(op.f('ix_reading_lists_is_public'), 'reading_lists', ['is_public'], unique=False)
    op.create_index(op.f('ix_reading_lists_created_at'), 'reading_lists', ['created_at'], unique=False)

    op.create_table(
        'reading_list_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reading_list_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['reading_list_id'], ['reading_lists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reading_list_id', 'book_id', name='uq_reading_list_item_book'),
    )
    op.create_index(op.f('ix_reading_list_items_reading_list_id'), 'reading_list_items', ['reading_list_id'], unique=False)
    op.create_index(op.f('ix_reading_list_items_book_id'), 'reading_list_items', ['book_id'], unique=False)
    op.create_index(op.f('ix_reading_list_items_created_at'), 'reading_list_items', ['created_at'], unique=False)

    op.create_table(
        'reference_upvotes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('reference_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reference_id'], ['book_references.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'reference_id', name='uq_reference_upvote_user'),
    )
    op.create_index(op.f('ix_reference_upvotes_user_id'), 'reference_upvotes', ['user_id'], unique=False)
    op.create_index(op.f('ix_reference_upvotes_reference_id'), 'reference_upvotes', ['reference_id'], unique=False)
    op.create_index(op.f('ix_reference_upvotes_created_at'), 'reference_upvotes', ['created_at'], unique=False)

    op.create_table(
        'reference_comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('reference_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reference_id'], ['book_references.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reference_comments_user_id'), 'reference_comments', ['user_id'], unique=False)
    op.create_index(op.f('ix_reference_comments_reference_id'), 'reference_comments', ['reference_id'], unique=False)
    op.create_index(op.f('ix_reference_comments_created_at'), 'reference_comments', ['created_at'], unique=False)

    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.Enum('BUG', 'FEATURE', 'GENERAL', name='feedbacktype'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('page_url', sa.String(length=1000), nullable=True),
        sa.Column(
            'status',
            sa.Enum('NEW', 'READ', 'IN_PROGRESS', 'RESOLVED', 'DISMISSED', name='feedbackstatus'),
            nullable=False,
        ),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_feedback_user_id'), 'feedback', ['user_id'], unique=False)
    op.create_index(op.f('ix_feedback_status'), 'feedback', ['status'], unique=False)
    op.create_index('ix_feedback_status_type', 'feedback', ['status', 'type'], unique=False)
    op.create_index(op.f('ix_feedback_created_at'), 'feedback', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('feedback')
    op.drop_table('reference_comments')
    op.drop_table('reference_upvotes')
    op.drop_table('reading_list_items')
    op.drop_table('reading_lists')
    op.drop_table('book_references')
    op.drop_table('books')
    op.drop_table('users')
    sa.Enum(name='feedbackstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='feedbacktype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='referencesource').drop(op.get_bind(), checkfirst=True)
