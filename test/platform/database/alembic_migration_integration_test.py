from pathlib import Path

from alembic import command
from alembic.config import Config
import pytest
from sqlalchemy import create_engine, inspect


PROJECT_ROOT = Path(__file__).resolve().parents[3]


@pytest.mark.integration
def test_upgrade_head_creates_booking_schema(tmp_path: Path) -> None:
    db_path = tmp_path / 'migrate.db'
    config = Config(str(PROJECT_ROOT / 'alembic.ini'))
    config.set_main_option('script_location', str(PROJECT_ROOT / 'src' / 'platform' / 'alembic'))
    config.set_main_option('sqlalchemy.url', f'sqlite+aiosqlite:///{db_path}')

    command.upgrade(config, 'head')

    engine = create_engine(f'sqlite:///{db_path}')
    try:
        inspector = inspect(engine)
        assert {'booking', 'booking_seat'} <= set(inspector.get_table_names())
        seat_uniques = {
            tuple(constraint['column_names'])
            for constraint in inspector.get_unique_constraints('booking_seat')
        }
        assert ('showtime_id', 'seat_number') in seat_uniques
    finally:
        engine.dispose()
