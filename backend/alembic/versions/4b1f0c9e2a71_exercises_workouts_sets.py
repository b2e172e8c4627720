"""users, exercises, workouts, workout exercises and sets

Revision ID: 4b1f0c9e2a71
Revises:
Create Date: 2026-10-19 10:12:03.418220

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1f0c9e2a71'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

weight_type = sa.Enum('bodyweight', 'assisted', 'additional', name='weight_type')
exercise_type = sa.Enum('main', 'auxiliary', 'isolation', name='exercise_type')
workout_status = sa.Enum('active', 'completed', name='workout_status')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('muscle_group', sa.String(length=40), nullable=False),
        sa.Column('weight_type', weight_type, nullable=False),
        sa.Column('technique', sa.Text(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('exercise_type', exercise_type, nullable=False),
        sa.Column('equipment_name', sa.String(length=120), nullable=True),
        sa.Column('equipment_settings', sa.Text(), nullable=True),
        sa.Column('equipment_photo', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_exercises_user_id', 'exercises', ['user_id'])
    op.create_index('ix_exercises_muscle_group', 'exercises', ['muscle_group'])

    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', workout_status, nullable=False, server_default='active'),
        sa.Column('current_exercise_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_set_index', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_workouts_user_id', 'workouts', ['user_id'])
    op.create_index('ix_workouts_started_at', 'workouts', ['started_at'])
    # one active workout per user
    op.create_index(
        'uq_workouts_active_per_user', 'workouts', ['user_id'], unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )

    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='SET NULL'), nullable=True),
        sa.Column('exercise_snapshot', sa.JSON(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('planned_sets', sa.Integer(), nullable=False),
        sa.Column('target_reps', sa.Integer(), nullable=False),
        sa.Column('rest_seconds', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('weight_achieved', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_workout_exercises_workout_id', 'workout_exercises', ['workout_id'])
    op.create_index('ix_workout_exercises_exercise_id', 'workout_exercises', ['exercise_id'])

    op.create_table(
        'workout_sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_exercise_id', sa.Integer(), sa.ForeignKey('workout_exercises.id', ondelete='CASCADE'), nullable=False),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('target_reps', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(10, 2), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('rest_seconds', sa.Integer(), nullable=False),
    )
    op.create_index('ix_workout_sets_workout_exercise_id', 'workout_sets', ['workout_exercise_id'])


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('workout_sets')
    op.drop_table('workout_exercises')
    op.drop_index('uq_workouts_active_per_user', table_name='workouts')
    op.drop_table('workouts')
    op.drop_table('exercises')
    op.drop_table('users')

    # finally drop enum types (no-op outside PostgreSQL)
    workout_status.drop(op.get_bind(), checkfirst=True)
    exercise_type.drop(op.get_bind(), checkfirst=True)
    weight_type.drop(op.get_bind(), checkfirst=True)
