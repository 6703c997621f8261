import pytest

from src.platform.config.core_setting import Settings
from src.platform.constant.path import BASE_DIR


ENV_EXAMPLE = BASE_DIR / '.env.example'


@pytest.mark.unit
class TestSettings:
    @pytest.fixture(autouse=True)
    def _no_cors_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)

    def test_shipped_env_example_loads(self) -> None:
        settings = Settings(_env_file=ENV_EXAMPLE)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == ['http://localhost:5173']
        assert settings.PENDING_BOOKING_TTL_MINUTES == 30

    @pytest.mark.parametrize(
        'raw,expected',
        [
            ('http://a.test, http://b.test', ['http://a.test', 'http://b.test']),
            ('["http://a.test", "http://b.test"]', ['http://a.test', 'http://b.test']),
            ('http://a.test', ['http://a.test']),
        ],
    )
    def test_cors_origins_from_env(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: list[str]
    ) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', raw)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == expected
