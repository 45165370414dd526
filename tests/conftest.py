import pytest

from wallet_ledger.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; tests that patch the environment need a reload."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
