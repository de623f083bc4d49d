"""Create languages table and insert the default languages

Revision ID: 001_create_languages_table
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.services.language_service import DEFAULT_LANGUAGES

# revision identifiers, used by Alembic.
revision = '001_create_languages_table'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the languages table with its (is_active, sort_order) index."""
    table_name = settings.languages_table
    op.create_table(
        table_name,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('language_code', sa.String(length=10), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('native_name', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(f'ix_{table_name}_language_code', table_name, ['language_code'], unique=True)
    op.create_index(f'{table_name}_is_active_sort_order_index', table_name, ['is_active', 'sort_order'])

    languages_table = sa.table(
        table_name,
        sa.column('language_code', sa.String),
        sa.column('name', sa.String),
        sa.column('native_name', sa.String),
        sa.column('is_active', sa.Boolean),
        sa.column('sort_order', sa.Integer),
    )
    op.bulk_insert(languages_table, DEFAULT_LANGUAGES)


def downgrade() -> None:
    """Drop the languages table."""
    table_name = settings.languages_table
    op.drop_index(f'{table_name}_is_active_sort_order_index', table_name=table_name)
    op.drop_index(f'ix_{table_name}_language_code', table_name=table_name)
    op.drop_table(table_name)
