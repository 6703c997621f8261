from prometheus_client import CollectorRegistry, Counter, Histogram, REGISTRY


class BookingMetrics:
    """
    Booking Service Core Metrics Collector

    Tracks booking creation, checkout sessions and payment confirmations.
    A dedicated registry can be passed in tests to avoid duplicate timeseries.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        # ========== Booking Metrics ==========
        self.bookings_created = Counter(
            'bookings_created_total',
            'Total bookings created',
            ['movie_id'],
            registry=registry,
        )

        self.bookings_cancelled = Counter(
            'bookings_cancelled_total',
            'Total bookings cancelled',
            ['reason'],  # reason: user/expired
            registry=registry,
        )

        self.booking_seats = Histogram(
            'booking_seats',
            'Seats per booking',
            buckets=[1, 2, 3, 4, 5, 6, 8, 10],
            registry=registry,
        )

        # ========== Payment Metrics ==========
        self.checkout_sessions = Counter(
            'checkout_sessions_total',
            'Checkout sessions requested from the payment gateway',
            ['result'],  # result: created/failed
            registry=registry,
        )

        self.payment_confirmations = Counter(
            'payment_confirmations_total',
            'Payment confirmation attempts',
            ['result'],  # result: paid/unsettled/failed
            registry=registry,
        )

        self.payment_gateway_duration = Histogram(
            'payment_gateway_duration_seconds',
            'Payment gateway call duration',
            ['operation'],  # operation: create_session/verify_session
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
            registry=registry,
        )

    def record_booking_created(self, *, movie_id: str, seats: int) -> None:
        self.bookings_created.labels(movie_id=movie_id).inc()
        self.booking_seats.observe(seats)

    def record_booking_cancelled(self, *, reason: str, count: int = 1) -> None:
        if count > 0:
            self.bookings_cancelled.labels(reason=reason).inc(count)

    def record_checkout_session(self, *, result: str) -> None:
        self.checkout_sessions.labels(result=result).inc()

    def record_payment_confirmation(self, *, result: str) -> None:
        self.payment_confirmations.labels(result=result).inc()


# Global metrics instance
metrics = BookingMetrics()
