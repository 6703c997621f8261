"""Application layer interfaces (Ports)"""

from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.booking.app.interface.i_showtime_provider import IShowtimeProvider

__all__ = [
    'IBookingRecordStore',
    'ICatalog',
    'IPaymentGateway',
    'IShowtimeProvider',
]
