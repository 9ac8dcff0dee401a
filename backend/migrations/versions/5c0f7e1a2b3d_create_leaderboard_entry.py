"""create leaderboard_entry

Revision ID: 5c0f7e1a2b3d
Revises:
Create Date: 2025-10-14 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c0f7e1a2b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'leaderboard_entry' in set(insp.get_table_names()):
        return

    op.create_table(
        'leaderboard_entry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leaderboard_entry_name', 'leaderboard_entry', ['name'])
    op.create_index(
        'ix_leaderboard_entry_score_level',
        'leaderboard_entry',
        [sa.text('score DESC'), sa.text('level DESC')],
    )


def downgrade():
    op.drop_index('ix_leaderboard_entry_score_level', table_name='leaderboard_entry')
    op.drop_index('ix_leaderboard_entry_name', table_name='leaderboard_entry')
    op.drop_table('leaderboard_entry')
