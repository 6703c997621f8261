"""init_booking_schema

Revision ID: 0001
Revises:
Create Date: 2025-01-10

Changes:
- booking: one row per booking, payment_status pending/paid/cancelled
- booking_seat: seats held by live bookings, unique per (showtime_id, seat_number)
- payment_session_id is unique so a checkout session confirms one booking only
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'booking',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('movie_id', sa.String(64), nullable=False),
        sa.Column('showtime_id', sa.String(128), nullable=False),
        sa.Column('show_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('seats', sa.Integer(), nullable=False),
        sa.Column('seat_numbers', sa.JSON(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(20), nullable=False),
        sa.Column('payment_session_id', sa.String(255), nullable=True, unique=True),
        sa.Column(
            'booking_time', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            'updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index('ix_booking_user_id', 'booking', ['user_id'])
    op.create_index('ix_booking_showtime_id', 'booking', ['showtime_id'])
    op.create_index('ix_booking_payment_status', 'booking', ['payment_status'])

    op.create_table(
        'booking_seat',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'booking_id',
            sa.Uuid(as_uuid=True),
            sa.ForeignKey('booking.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('showtime_id', sa.String(128), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.UniqueConstraint('showtime_id', 'seat_number', name='uq_booking_seat_showtime_seat'),
    )
    op.create_index('ix_booking_seat_booking_id', 'booking_seat', ['booking_id'])


def downgrade() -> None:
    op.drop_index('ix_booking_seat_booking_id', table_name='booking_seat')
    op.drop_table('booking_seat')
    op.drop_index('ix_booking_payment_status', table_name='booking')
    op.drop_index('ix_booking_showtime_id', table_name='booking')
    op.drop_index('ix_booking_user_id', table_name='booking')
    op.drop_table('booking')
