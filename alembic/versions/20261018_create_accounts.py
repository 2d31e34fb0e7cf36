"""create_accounts

Revision ID: 5f2c9a1d7e40
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5f2c9a1d7e40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('accounts',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Account ID (UUID)'),
        sa.Column('username', sa.String(length=255), nullable=True, comment='Optional unique username'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Account email address'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='Hashed password (argon2)'),
        sa.Column('verified', sa.Boolean(), server_default=sa.false(), nullable=False, comment='Whether the email address has been verified'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_accounts_email'),
        sa.UniqueConstraint('username', name='uq_accounts_username')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('accounts')
