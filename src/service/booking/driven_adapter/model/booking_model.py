from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import JSON, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    movie_id: Mapped[str] = mapped_column(String(64), nullable=False)
    showtime_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    show_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    seats: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_numbers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default='pending', nullable=False, index=True
    )
    payment_session_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, unique=True
    )
    booking_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
