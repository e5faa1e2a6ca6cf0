"""users, checkins and wellness_assessments

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

mood_category = sa.Enum('positive', 'neutral', 'stressed', 'high_risk', name='mood_category')
checkin_input_type = sa.Enum('text', 'voice', name='checkin_input_type')
user_role = sa.Enum('employee', 'management', name='user_role')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('employee_id', sa.String(64), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('vessel', sa.String(120), nullable=True),          # null = shore-based
        sa.Column('department', sa.String(120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'checkins',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('checkin_day', sa.Date(), nullable=False),
        sa.Column('mood_input', sa.Text(), nullable=False),
        sa.Column('input_type', checkin_input_type, nullable=False),
        sa.Column('sentiment_score', sa.Float(), nullable=False),     # -1..1
        sa.Column('wellness_score', sa.Integer(), nullable=False),    # 0-100
        sa.Column('mood_category', mood_category, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'checkin_day', name='uq_checkins_user_day'),
    )
    op.create_index('ix_checkins_user_id', 'checkins', ['user_id'])
    op.create_index('ix_checkins_date', 'checkins', ['date'])
    op.create_index('ix_checkins_mood_category', 'checkins', ['mood_category'])

    op.create_table(
        'wellness_assessments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('generated_questions', sa.JSON(), nullable=False),
        sa.Column('responses', sa.JSON(), nullable=False),
        sa.Column('overall_score', sa.Integer(), nullable=True),      # set on completion
        sa.Column('insights', sa.JSON(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('mood', sa.String(64), nullable=True),
        sa.Column('stress_level', sa.Integer(), nullable=True),       # 1-10
        sa.Column('energy_level', sa.Integer(), nullable=True),       # 1-10
        sa.Column('work_satisfaction', sa.Integer(), nullable=True),  # 1-10
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_wellness_assessments_user_day'),
    )
    op.create_index('ix_wellness_assessments_user_id', 'wellness_assessments', ['user_id'])
    op.create_index('ix_wellness_assessments_date', 'wellness_assessments', ['date'])


def downgrade():
    op.drop_table('wellness_assessments')
    op.drop_table('checkins')
    op.drop_table('users')
    mood_category.drop(op.get_bind(), checkfirst=True)
    checkin_input_type.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
