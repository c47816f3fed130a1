"""Learner ledgers and completion records

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One current snapshot per profile
    op.create_table(
        'learner_ledgers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('profile_id', sa.String(128), nullable=False, unique=True, index=True),
        sa.Column('snapshot', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Append-only audit of granted completions
    op.create_table(
        'completion_records',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('profile_id', sa.String(128), nullable=False, index=True),
        sa.Column('unit_id', sa.String(128), nullable=False),
        sa.Column('unit_kind', sa.String(50), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('percentage', sa.Integer(), nullable=True),
        sa.Column('ledger_version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('profile_id', 'unit_id', name='uq_completion_records_profile_unit'),
    )
    op.create_index(
        'ix_completion_records_profile_kind',
        'completion_records',
        ['profile_id', 'unit_kind'],
    )


def downgrade() -> None:
    op.drop_index('ix_completion_records_profile_kind', table_name='completion_records')
    op.drop_table('completion_records')
    op.drop_table('learner_ledgers')
