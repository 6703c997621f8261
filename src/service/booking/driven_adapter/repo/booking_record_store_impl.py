"""
Booking Record Store (SQLAlchemy)

Status transitions are single conditional UPDATE statements
(``... WHERE id = :id AND payment_status = 'pending'``): whichever caller's
statement matches first wins, every later caller re-reads the row and gets
either the unchanged terminal record or a ConflictError.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncContextManager, AsyncIterator, Callable, FrozenSet, List
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.exception.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.domain.entity.booking_entity import Booking, PaymentStatus
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.booking_seat_model import BookingSeatModel


def _pk(booking_id: UUID) -> uuid.UUID:
    # SQLAlchemy's Uuid type binds stdlib uuid.UUID only
    return uuid.UUID(str(booking_id))


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class BookingRecordStoreImpl(IBookingRecordStore):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    @staticmethod
    def _to_entity(db_booking: BookingModel) -> Booking:
        """
        Convert BookingModel to Booking entity

        Note: SQLAlchemy returns stdlib uuid.UUID; the domain uses uuid_utils.UUID.
        """
        return Booking(
            id=UUID(str(db_booking.id)),
            user_id=db_booking.user_id,
            movie_id=db_booking.movie_id,
            showtime_id=db_booking.showtime_id,
            show_time=_as_utc(db_booking.show_time),
            seats=db_booking.seats,
            total_price=db_booking.total_price,
            seat_numbers=list(db_booking.seat_numbers or []),
            payment_status=PaymentStatus(db_booking.payment_status),
            payment_session_id=db_booking.payment_session_id,
            booking_time=_as_utc(db_booking.booking_time),
            created_at=_as_utc(db_booking.created_at),
            updated_at=_as_utc(db_booking.updated_at),
        )

    @staticmethod
    async def _load(session: AsyncSession, booking_id: UUID) -> BookingModel | None:
        result = await session.execute(
            select(BookingModel)
            .where(BookingModel.id == _pk(booking_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _load_owned(
        self, session: AsyncSession, booking_id: UUID, caller_id: str
    ) -> BookingModel:
        db_booking = await self._load(session, booking_id)
        if db_booking is None:
            raise NotFoundError('Booking not found')
        if db_booking.user_id != caller_id:
            raise AuthorizationError('Booking belongs to another user')
        return db_booking

    async def _transition_from_pending(
        self, session: AsyncSession, booking_id: UUID, target: PaymentStatus
    ) -> bool:
        result = await session.execute(
            update(BookingModel)
            .where(
                BookingModel.id == _pk(booking_id),
                BookingModel.payment_status == PaymentStatus.PENDING.value,
            )
            .values(payment_status=target.value, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        db_booking = BookingModel(
            id=_pk(booking.id),
            user_id=booking.user_id,
            movie_id=booking.movie_id,
            showtime_id=booking.showtime_id,
            show_time=booking.show_time,
            seats=booking.seats,
            seat_numbers=list(booking.seat_numbers),
            total_price=booking.total_price,
            payment_status=booking.payment_status.value,
            payment_session_id=booking.payment_session_id,
        )
        now = datetime.now(timezone.utc)
        db_booking.booking_time = booking.booking_time or now
        db_booking.created_at = booking.created_at or now
        db_booking.updated_at = booking.updated_at or now
        async with self._get_session() as session:
            session.add(db_booking)
            # Flush the booking first so the seat rows' foreign key resolves
            await session.flush()
            session.add_all(
                BookingSeatModel(
                    booking_id=db_booking.id,
                    showtime_id=booking.showtime_id,
                    seat_number=seat_number,
                )
                for seat_number in booking.seat_numbers
            )
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise SeatUnavailableError('Selected seats are no longer available') from e
            return self._to_entity(db_booking)

    @Logger.io
    async def get(self, *, booking_id: UUID) -> Booking | None:
        async with self._get_session() as session:
            db_booking = await self._load(session, booking_id)
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def get_owned(self, *, booking_id: UUID, caller_id: str) -> Booking:
        async with self._get_session() as session:
            return self._to_entity(await self._load_owned(session, booking_id, caller_id))

    @Logger.io
    async def mark_paid(self, *, booking_id: UUID, caller_id: str) -> Booking:
        async with self._get_session() as session:
            await self._load_owned(session, booking_id, caller_id)
            changed = await self._transition_from_pending(session, booking_id, PaymentStatus.PAID)
            await session.commit()

            db_booking = await self._load(session, booking_id)
            if db_booking is None:
                raise NotFoundError('Booking not found')
            booking = self._to_entity(db_booking)

        booking.validate_can_be_paid()
        if changed:
            Logger.base.info(f'💰 [STORE] Booking {booking_id} marked as paid')
        else:
            Logger.base.info(f'🔁 [STORE] Booking {booking_id} already paid, returned unchanged')
        return booking

    @Logger.io
    async def mark_cancelled(self, *, booking_id: UUID, caller_id: str) -> Booking:
        async with self._get_session() as session:
            await self._load_owned(session, booking_id, caller_id)
            changed = await self._transition_from_pending(
                session, booking_id, PaymentStatus.CANCELLED
            )
            if changed:
                await session.execute(
                    delete(BookingSeatModel).where(BookingSeatModel.booking_id == _pk(booking_id))
                )
            await session.commit()

            db_booking = await self._load(session, booking_id)
            if db_booking is None:
                raise NotFoundError('Booking not found')
            booking = self._to_entity(db_booking)

        booking.validate_can_be_cancelled()
        if changed:
            Logger.base.info(f'🚫 [STORE] Booking {booking_id} cancelled, seats released')
        return booking

    @Logger.io
    async def attach_payment_session(
        self, *, booking_id: UUID, caller_id: str, session_id: str
    ) -> Booking:
        async with self._get_session() as session:
            db_booking = await self._load_owned(session, booking_id, caller_id)
            if db_booking.payment_session_id == session_id:
                return self._to_entity(db_booking)

            try:
                result = await session.execute(
                    update(BookingModel)
                    .where(
                        BookingModel.id == _pk(booking_id),
                        BookingModel.payment_status == PaymentStatus.PENDING.value,
                    )
                    .values(payment_session_id=session_id, updated_at=datetime.now(timezone.utc))
                    .execution_options(synchronize_session=False)
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConflictError('Payment session is already bound to another booking') from e

            db_booking = await self._load(session, booking_id)
            if db_booking is None:
                raise NotFoundError('Booking not found')
            booking = self._to_entity(db_booking)

        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise ConflictError(f'Booking already has status: {booking.payment_status}')
        return booking

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.user_id == user_id)
                .order_by(BookingModel.booking_time.desc(), BookingModel.id.desc())
            )
            return [self._to_entity(db_booking) for db_booking in result.scalars().all()]

    @Logger.io
    async def list_held_seats(self, *, showtime_id: str) -> FrozenSet[int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingSeatModel.seat_number).where(
                    BookingSeatModel.showtime_id == showtime_id
                )
            )
            return frozenset(result.scalars().all())

    @Logger.io
    async def cancel_expired(self, *, older_than: datetime) -> List[UUID]:
        async with self._get_session() as session:
            # Bookings with a checkout session may still settle at the provider
            stale = (
                BookingModel.payment_status == PaymentStatus.PENDING.value,
                BookingModel.payment_session_id.is_(None),
                BookingModel.created_at < older_than,
            )
            result = await session.execute(select(BookingModel.id).where(*stale))
            candidates = list(result.scalars().all())

            cancelled: List[UUID] = []
            for pk in candidates:
                # Re-checked per row: a booking paid or sent to checkout meanwhile keeps its seats
                update_result = await session.execute(
                    update(BookingModel)
                    .where(BookingModel.id == pk, *stale)
                    .values(
                        payment_status=PaymentStatus.CANCELLED.value,
                        updated_at=datetime.now(timezone.utc),
                    )
                    .execution_options(synchronize_session=False)
                )
                if update_result.rowcount == 1:  # type: ignore[attr-defined]
                    await session.execute(
                        delete(BookingSeatModel).where(BookingSeatModel.booking_id == pk)
                    )
                    cancelled.append(UUID(str(pk)))
            await session.commit()

        if cancelled:
            Logger.base.info(f'⏰ [STORE] Cancelled {len(cancelled)} expired pending bookings')
        return cancelled
