"""create game_record key-value table

Revision ID: 1c7e9a2f5b30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c7e9a2f5b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game_record' in insp.get_table_names():
        return
    op.create_table(
        'game_record',
        sa.Column('key', sa.String(length=128), primary_key=True),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade():
    op.drop_table('game_record')
