"""Add credential columns to users

Revision ID: c47d05e9b2a8
Revises: 8b2e6d4f0a31
Create Date: 2012-11-06 00:52:40.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = 'c47d05e9b2a8'
down_revision: Union[str, Sequence[str], None] = '8b2e6d4f0a31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table('users') as batch_op:
        batch_op.add_column(sa.Column('email', sa.String(length=255), nullable=True))
        batch_op.add_column(sa.Column('password_hash', sa.String(), nullable=True))

    # Rows that predate the new scheme get a unique placeholder address and no usable password
    op.execute(
        "UPDATE users SET email = 'legacy-user-' || id || '@example.invalid', password_hash = '' "
        "WHERE email IS NULL"
    )

    with op.batch_alter_table('users') as batch_op:
        batch_op.alter_column('email', existing_type=sa.String(length=255), nullable=False)
        batch_op.alter_column('password_hash', existing_type=sa.String(), nullable=False)

    # Case-insensitive uniqueness enforced by the database itself
    op.create_index('ix_users_email_lower', 'users', [sa.text('lower(email)')], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_users_email_lower', table_name='users')
    with op.batch_alter_table('users') as batch_op:
        batch_op.drop_column('password_hash')
        batch_op.drop_column('email')
