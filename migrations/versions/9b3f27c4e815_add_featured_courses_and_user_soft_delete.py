"""add featured courses and user soft delete

Revision ID: 9b3f27c4e815
Revises: 5c1e9a7d2b40
Create Date: 2026-10-18 15:40:02.907115

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b3f27c4e815'
down_revision: Union[str, None] = '5c1e9a7d2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    with op.batch_alter_table('courses') as batch_op:
        batch_op.add_column(sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False))
    with op.batch_alter_table('users') as batch_op:
        batch_op.add_column(sa.Column('is_deleted', sa.Boolean(), server_default=sa.false(), nullable=False))

def downgrade() -> None:
    with op.batch_alter_table('users') as batch_op:
        batch_op.drop_column('is_deleted')
    with op.batch_alter_table('courses') as batch_op:
        batch_op.drop_column('is_featured')
