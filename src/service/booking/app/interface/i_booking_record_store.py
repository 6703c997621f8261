"""
Booking Record Store Interface

Durable booking records and their payment status. Every mutating call takes
the caller id and checks ownership before touching the record; status checks
and status writes happen in one atomic statement.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import FrozenSet, List, Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingRecordStore(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Persist a new pending booking together with its seat holds.

        Raises:
            SeatUnavailableError: one of the seats is already held for the showtime
        """
        pass

    @abstractmethod
    async def get(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_owned(self, *, booking_id: UUID, caller_id: str) -> Booking:
        """
        Raises:
            NotFoundError: booking does not exist
            AuthorizationError: booking belongs to another user
        """
        pass

    @abstractmethod
    async def mark_paid(self, *, booking_id: UUID, caller_id: str) -> Booking:
        """
        pending -> paid. An already paid booking is returned unchanged.

        Raises:
            NotFoundError, AuthorizationError
            ConflictError: booking was cancelled
        """
        pass

    @abstractmethod
    async def mark_cancelled(self, *, booking_id: UUID, caller_id: str) -> Booking:
        """
        pending -> cancelled and release the held seats. An already cancelled
        booking is returned unchanged.

        Raises:
            NotFoundError, AuthorizationError
            ConflictError: booking was already paid
        """
        pass

    @abstractmethod
    async def attach_payment_session(
        self, *, booking_id: UUID, caller_id: str, session_id: str
    ) -> Booking:
        """
        Record the checkout session created for a pending booking.

        Raises:
            ConflictError: booking is no longer pending or the session id is
                already bound to another booking
        """
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        """Bookings of one user, newest booking_time first"""
        pass

    @abstractmethod
    async def list_held_seats(self, *, showtime_id: str) -> FrozenSet[int]:
        """Seat numbers held by pending or paid bookings of a showtime"""
        pass

    @abstractmethod
    async def cancel_expired(self, *, older_than: datetime) -> List[UUID]:
        """
        Cancel pending bookings created before ``older_than`` that never reached
        checkout; returns their ids. A booking with a payment session stays
        pending until it is confirmed or cancelled by its owner.
        """
        pass
