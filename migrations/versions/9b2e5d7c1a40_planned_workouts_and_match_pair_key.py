"""Planned workouts, unique match pair key, account deactivation

Revision ID: 9b2e5d7c1a40
Revises: 4c1f0a9e2b7d
Create Date: 2026-10-26 15:40:08.913552

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9b2e5d7c1a40'
down_revision = '4c1f0a9e2b7d'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.add_column(sa.Column('deactivated_at', sa.DateTime(), nullable=True))

    # 1. add the pair key as nullable, 2. fill it, 3. make it required and unique
    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.add_column(sa.Column('pair_key', sa.String(length=41), nullable=True))

    op.execute(
        """
        UPDATE matches
        SET pair_key = CASE
            WHEN initiator_id < receiver_id
                THEN CAST(initiator_id AS VARCHAR(20)) || ':' || CAST(receiver_id AS VARCHAR(20))
            ELSE CAST(receiver_id AS VARCHAR(20)) || ':' || CAST(initiator_id AS VARCHAR(20))
        END
        """
    )

    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.alter_column('pair_key', existing_type=sa.String(length=41), nullable=False)
        batch_op.create_unique_constraint('uq_matches_pair_key', ['pair_key'])

    op.create_table('planned_workouts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('match_id', sa.Integer(), nullable=False),
        sa.Column('proposer_id', sa.Integer(), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=False),
        sa.Column('workout_type', sa.String(length=30), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('proposed','confirmed','completed','cancelled')"),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['proposer_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('planned_workouts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_planned_workouts_match_id'), ['match_id'], unique=False)


def downgrade():
    op.drop_table('planned_workouts')

    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.drop_constraint('uq_matches_pair_key', type_='unique')
        batch_op.drop_column('pair_key')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_column('deactivated_at')
