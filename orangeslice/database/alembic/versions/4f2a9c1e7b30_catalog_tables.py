"""entry, tag and entry_tag

Revision ID: 4f2a9c1e7b30
Revises:
Create Date: 2026-10-12 10:41:27.118402

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4f2a9c1e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _service_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('date_created', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('data_origin', sa.Text(), nullable=True),
        sa.Column('meta_data', sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql'), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'entry',
        *_service_columns(),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('github_link', sa.Text(), nullable=True),
        sa.Column('project_link', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_entry')),
    )
    op.create_index('ix_entry_name_lower', 'entry', [sa.text('lower(name)')], unique=False)

    op.create_table(
        'tag',
        *_service_columns(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('color', sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tag')),
    )

    op.create_table(
        'entry_tag',
        *_service_columns(),
        sa.Column('entry_id', sa.Uuid(), nullable=False),
        sa.Column('tag_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['entry_id'], ['entry.id'],
                                name=op.f('fk_entry_tag_entry_id_entry'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tag.id'],
                                name=op.f('fk_entry_tag_tag_id_tag'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_entry_tag')),
        sa.UniqueConstraint('entry_id', 'tag_id', name='uq_entry_tag_entry_tag'),
    )
    op.create_index('ix_entry_tag_entry_id', 'entry_tag', ['entry_id'], unique=False)
    op.create_index('ix_entry_tag_tag_id', 'entry_tag', ['tag_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_entry_tag_tag_id', table_name='entry_tag')
    op.drop_index('ix_entry_tag_entry_id', table_name='entry_tag')
    op.drop_table('entry_tag')
    op.drop_table('tag')
    op.drop_index('ix_entry_name_lower', table_name='entry')
    op.drop_table('entry')
