from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.platform.types.uuid7_utils_types import UtilsUUID7


class BookingCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'examples': [
                {'movie_id': '1', 'showtime_id': '1:1:20250110:0', 'seat_numbers': [12, 13]},
            ]
        },
    }

    movie_id: str
    showtime_id: str
    seat_numbers: List[int] = Field(min_length=1)


class BookingResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'user_id': 'b6c1f3e2-4d3a-4a8e-9f0a-1c2d3e4f5a6b',
                'movie_id': '1',
                'showtime_id': '1:1:20250110:0',
                'show_time': '2025-01-10T19:00:00+00:00',
                'seats': 2,
                'seat_numbers': [12, 13],
                'seat_labels': ['B4', 'B5'],
                'total_price': 600,
                'payment_status': 'pending',
                'booking_time': '2025-01-10T10:30:00+00:00',
            }
        },
    }

    id: UtilsUUID7  # UUID7
    user_id: str
    movie_id: str
    showtime_id: str
    show_time: datetime
    seats: int
    seat_numbers: List[int]
    seat_labels: List[str]
    total_price: int
    payment_status: str
    booking_time: Optional[datetime] = None


class CheckoutResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'session_id': 'cs_test_a1b2c3',
                'url': 'https://checkout.example.com/c/pay/cs_test_a1b2c3',
            }
        },
    }

    session_id: str
    url: str


class VerifyPaymentRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'session_id': 'cs_test_a1b2c3'}}}

    session_id: str = Field(min_length=1)


class PaymentAcknowledgementResponse(BaseModel):
    booking_id: UtilsUUID7
    success: bool
    payment_status: str
    message: Optional[str] = None


class CancelBookingResponse(BaseModel):
    id: UtilsUUID7
    payment_status: str
    released_seats: List[int]
