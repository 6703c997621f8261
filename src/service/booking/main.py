"""
Booking Service - Main Application
Movie catalog, showtimes, seat selection, bookings and payment confirmation.
"""

from contextlib import asynccontextmanager
from datetime import timedelta

import anyio
from fastapi import FastAPI

from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.booking.app.command.cancel_expired_bookings_use_case import (
    CancelExpiredBookingsUseCase,
)
from src.service.booking.driving_adapter.background.booking_expiry_sweeper import (
    BookingExpirySweeper,
)
from src.platform.app_factory import create_app


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Booking Service] Starting up...')

    tracing = TracingConfig(service_name='booking-service')
    tracing.setup()
    Logger.base.info('📊 [Booking Service] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Service] Dependency injection wired')

    database = container.database()
    if tracing.enabled:
        tracing.instrument_sqlalchemy(engine=database.engine)
    await database.create_tables()
    Logger.base.info('🗄️  [Booking Service] Database tables ready')

    async with anyio.create_task_group() as task_group:
        if settings.PENDING_BOOKING_SWEEP_INTERVAL_SECONDS > 0:
            sweeper = BookingExpirySweeper(
                use_case=CancelExpiredBookingsUseCase(
                    booking_record_store=container.booking_record_store(),
                    booking_metrics=container.booking_metrics(),
                    ttl=timedelta(minutes=settings.PENDING_BOOKING_TTL_MINUTES),
                ),
                interval_seconds=settings.PENDING_BOOKING_SWEEP_INTERVAL_SECONDS,
            )
            task_group.start_soon(sweeper.run)  # type: ignore[arg-type]

        yield

        # Shutdown
        Logger.base.info('🛑 [Booking Service] Shutting down...')
        task_group.cancel_scope.cancel()

    container.unwire()
    await cleanup()
    tracing.shutdown()
    Logger.base.info('👋 [Booking Service] Shutdown complete')


app = create_app(lifespan=lifespan, description='Movie ticket booking service')
