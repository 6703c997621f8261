"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.driven_adapter.catalog.static_catalog import StaticCatalog
from src.service.booking.driven_adapter.payment.http_payment_gateway import HttpPaymentGateway
from src.service.booking.driven_adapter.payment.mock_payment_gateway import MockPaymentGateway
from src.service.booking.driven_adapter.repo.booking_record_store_impl import (
    BookingRecordStoreImpl,
)
from src.service.booking.driven_adapter.showtime.seeded_showtime_provider import (
    SeededShowtimeProvider,
)
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine is created lazily on first session)
    database = providers.Singleton(Database)

    # Repositories (stateless - open a session per call)
    booking_record_store = providers.Singleton(
        BookingRecordStoreImpl, session_factory=database.provided.session
    )

    # Reference data
    catalog = providers.Singleton(StaticCatalog)
    showtime_provider = providers.Singleton(SeededShowtimeProvider)

    # Payment gateway, chosen by PAYMENT_GATEWAY_MODE
    payment_gateway = providers.Selector(
        config_service.provided.PAYMENT_GATEWAY_MODE,
        mock=providers.Singleton(
            MockPaymentGateway,
            auto_settle=config_service.provided.PAYMENT_MOCK_AUTO_SETTLE,
        ),
        http=providers.Singleton(
            HttpPaymentGateway,
            base_url=config_service.provided.PAYMENT_GATEWAY_URL,
            timeout=config_service.provided.PAYMENT_GATEWAY_TIMEOUT,
        ),
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Metrics
    booking_metrics = providers.Object(metrics)


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    await container.database().dispose()
    container.reset_singletons()
