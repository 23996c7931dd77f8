from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from shorturl.constants import ENV


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    """Start every test from a clean application environment."""
    for name in (*ENV.App, *ENV.LocalStack):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis client with connection details for error messages."""
    client = MagicMock(
        spec=redis.Redis,
        connection_pool=MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0}),
    )
    client.ping.return_value = True
    return client
