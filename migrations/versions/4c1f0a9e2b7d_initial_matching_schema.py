"""Initial matching schema: users, availability slots, matches

Revision ID: 4c1f0a9e2b7d
Revises: 
Create Date: 2026-10-19 10:12:31.402117

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '4c1f0a9e2b7d'
down_revision = None
branch_labels = None
depends_on = None

TagList = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('user_type', sa.String(length=20), nullable=False),
        sa.Column('profile_image', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('fitness_level', sa.String(length=20), nullable=True),
        sa.Column('fitness_goals', TagList, nullable=True),
        sa.Column('preferred_workouts', TagList, nullable=True),
        sa.Column('preferred_gender', sa.String(length=10), nullable=True),
        sa.Column('preferred_age_min', sa.Integer(), nullable=True),
        sa.Column('preferred_age_max', sa.Integer(), nullable=True),
        sa.Column('is_profile_complete', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('account_status', sa.String(length=20), nullable=True),
        sa.Column('last_active', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("user_type IN ('user','instructor')"),
        sa.CheckConstraint("gender IN ('male','female','other','prefer_not_to_say')"),
        sa.CheckConstraint("fitness_level IN ('beginner','intermediate','advanced','professional')"),
        sa.CheckConstraint("preferred_gender IN ('male','female','any')"),
        sa.CheckConstraint("account_status IN ('pending','active','suspended','deleted')"),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_user_type'), ['user_type'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_is_profile_complete'), ['is_profile_complete'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_is_active'), ['is_active'], unique=False)
        batch_op.create_index(batch_op.f('ix_users_account_status'), ['account_status'], unique=False)
        batch_op.create_index('idx_users_location', ['latitude', 'longitude'], unique=False)
        batch_op.create_index('idx_users_matchable', ['is_profile_complete', 'is_active', 'account_status'], unique=False)

    op.create_table('availability_slots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('day', sa.String(length=10), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.CheckConstraint("day IN ('monday','tuesday','wednesday','thursday','friday','saturday','sunday')"),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('availability_slots', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_availability_slots_user_id'), ['user_id'], unique=False)
        batch_op.create_index('idx_availability_user_day', ['user_id', 'day'], unique=False)

    op.create_table('matches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('initiator_id', sa.Integer(), nullable=False),
        sa.Column('receiver_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=True),
        sa.Column('fitness_goals', sa.Integer(), nullable=True),
        sa.Column('workout_preferences', sa.Integer(), nullable=True),
        sa.Column('fitness_level', sa.Integer(), nullable=True),
        sa.Column('location_proximity', sa.Integer(), nullable=True),
        sa.Column('availability_overlap', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('matched_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('pending','accepted','rejected','expired')"),
        sa.CheckConstraint('match_score BETWEEN 0 AND 100'),
        sa.CheckConstraint('initiator_id <> receiver_id', name='ck_matches_distinct_users'),
        sa.ForeignKeyConstraint(['initiator_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_matches_initiator_id'), ['initiator_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_matches_receiver_id'), ['receiver_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_matches_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_matches_is_active'), ['is_active'], unique=False)
        batch_op.create_index(batch_op.f('ix_matches_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index('idx_matches_pair', ['initiator_id', 'receiver_id'], unique=False)


def downgrade():
    op.drop_table('matches')
    op.drop_table('availability_slots')
    op.drop_table('users')
