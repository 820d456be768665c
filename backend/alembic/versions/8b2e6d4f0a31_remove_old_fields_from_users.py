"""Remove old fields from users

Revision ID: 8b2e6d4f0a31
Revises: 3f9a1c2b7d10
Create Date: 2012-11-06 00:38:08.000000

Irreversible: the legacy credential columns and their data are dropped and
downgrade() does not restore them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '8b2e6d4f0a31'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Drop the legacy credential columns (data loss)
    with op.batch_alter_table('users') as batch_op:
        batch_op.drop_column('email')
        batch_op.drop_column('encrypted_password')
        batch_op.drop_column('salt')


def downgrade() -> None:
    """Downgrade schema."""
    # No-op: the dropped columns cannot be reconstructed
    pass
