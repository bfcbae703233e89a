"""initial schema: users, services, employees, posts, working hours, bookings, notifications

Revision ID: 001
Revises:
Create Date: 2026-03-02 10:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BOOKING_STATUSES = ('pending', 'confirmed', 'in_progress', 'completed', 'cancelled')
CONTROL_STATUSES = ('pending', 'confirmed', 'callback', 'no_answer', 'cancelled')
NOTIFICATION_TYPES = ('service', 'system')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False, server_default=''),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('telegram_chat_id', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='client'),
        sa.Column('is_active', sa.Boolean(), server_default='true'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_phone'), 'users', ['phone'], unique=False)

    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()')),
    )

    op.create_table(
        'employees',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()')),
    )

    op.create_table(
        'posts',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('use_custom_hours', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('start_time', sa.String(), nullable=False, server_default='09:00'),
        sa.Column('end_time', sa.String(), nullable=False, server_default='18:00'),
        sa.Column('interval_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()')),
    )

    op.create_table(
        'post_closed_slots',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('post_id', sa.String(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('time', sa.String(), nullable=False),
        sa.UniqueConstraint('post_id', 'time', name='uq_post_closed_slot'),
    )
    op.create_index(op.f('ix_post_closed_slots_post_id'), 'post_closed_slots', ['post_id'], unique=False)

    op.create_table(
        'working_hours',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('start_hour', sa.Integer(), nullable=False, server_default='9'),
        sa.Column('end_hour', sa.Integer(), nullable=False, server_default='18'),
        sa.Column('slot_duration_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()')),
        sa.CheckConstraint(
            'start_hour >= 0 AND start_hour < end_hour AND end_hour <= 24',
            name='ck_working_hours_range',
        ),
    )

    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('post_id', sa.String(), nullable=False),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employee_name', sa.String(), nullable=True),
        sa.Column('service_name', sa.String(), nullable=False),
        sa.Column('user_name', sa.String(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('date_time', sa.DateTime(), nullable=False),
        sa.Column('status', sa.Enum(*BOOKING_STATUSES, name='booking_status'), nullable=False, server_default='pending'),
        sa.Column('in_progress_started_at', sa.DateTime(), nullable=True),
        sa.Column('control_status', sa.Enum(*CONTROL_STATUSES, name='booking_control_status'), nullable=False, server_default='pending'),
        sa.Column('control_comment', sa.Text(), nullable=True),
        sa.Column('control_updated_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('rating_comment', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()')),
    )
    op.create_index(op.f('ix_bookings_service_id'), 'bookings', ['service_id'], unique=False)
    op.create_index(op.f('ix_bookings_user_id'), 'bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_bookings_post_id'), 'bookings', ['post_id'], unique=False)
    op.create_index(op.f('ix_bookings_date_time'), 'bookings', ['date_time'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    # One live booking per (post, slot start); cancelled rows free the slot
    op.create_index(
        'uq_bookings_live_slot',
        'bookings',
        ['post_id', 'date_time'],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
    )

    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.Enum(*NOTIFICATION_TYPES, name='notification_type'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_index('uq_bookings_live_slot', table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('working_hours')
    op.drop_table('post_closed_slots')
    op.drop_table('posts')
    op.drop_table('employees')
    op.drop_table('services')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_name in ('notification_type', 'booking_control_status', 'booking_status'):
        postgresql.ENUM(name=enum_name).drop(bind, checkfirst=True)
