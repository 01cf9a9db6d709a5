"""create player and game_state tables

Revision ID: 5c2a9e17b3d4
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e17b3d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    # create_app may have created the tables already on a fresh install
    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_player_username', 'player', ['username'], unique=True)

    if 'game_state' not in existing_tables:
        op.create_table(
            'game_state',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('used_nations', sa.Text(), nullable=False, server_default='[]'),
            sa.Column('last_letter', sa.String(length=1), nullable=False, server_default='S'),
            sa.PrimaryKeyConstraint('id'),
        )


def downgrade():
    op.drop_table('game_state')
    op.drop_index('ix_player_username', table_name='player')
    op.drop_table('player')
