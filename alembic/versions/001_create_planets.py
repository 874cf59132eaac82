"""create_planets

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('planets'):
        op.create_table('planets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('climate', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('terrain', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('reference_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('reference_count >= 0', name='ck_planets_reference_count'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_planets_id'), 'planets', ['id'], unique=False)
        op.create_index(op.f('ix_planets_name'), 'planets', ['name'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('planets'):
        op.drop_index(op.f('ix_planets_name'), table_name='planets')
        op.drop_index(op.f('ix_planets_id'), table_name='planets')
        op.drop_table('planets')
