import uuid

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class BookingSeatModel(Base):
    """
    Seat held by an active (pending or paid) booking.

    Rows are deleted when the booking is cancelled, so the unique constraint
    only ever covers live holds.
    """

    __tablename__ = 'booking_seat'
    __table_args__ = (
        UniqueConstraint('showtime_id', 'seat_number', name='uq_booking_seat_showtime_seat'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    showtime_id: Mapped[str] = mapped_column(String(128), nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
