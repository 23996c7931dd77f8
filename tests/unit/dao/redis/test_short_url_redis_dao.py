"""Unit tests for the ShortURLRedisDAO

Test coverage includes:

1. Initialization and configuration
   - Ensures the DAO uses a provided Redis client and healthchecks it.
   - Confirms an unreachable Redis raises DataStoreError.

2. Insertion behavior
   - Validates inserts write the mapping and the target index with SET NX.
   - Confirms duplicate shortcodes raise ShortURLAlreadyExistsError without touching the index.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms Redis connection errors and timeouts raise DataStoreError.

3. Retrieval by shortcode
   - Ensures fetching valid shortcodes returns a populated ShortURLModel.
   - Confirms bytes responses are decoded.
   - Confirms missing keys raise ShortURLNotFoundError.

4. Retrieval by target
   - Ensures indexed targets resolve to their mapping.
   - Confirms missing or mismatching index entries raise ShortURLNotFoundError.

5. Table lifecycle
   - Ensures drop_table() deletes mapping and index keys under the prefix.
"""

import re
from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from shorturl.models import ShortURLModel
from shorturl.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shorturl.dao.redis import ShortURLRedisDAO


TARGET = 'https://example.com/test'
TARGET_INDEX_KEY = 'testapp:test:targets:32c70e03740c401e245c7cf027863dde:shortcode'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a ShortURLRedisDAO instance with a mocked Redis client."""
    return ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_with_redis_client(dao, redis_client):
    """Ensure the DAO uses the provided client and pings it once."""
    assert dao.redis is redis_client
    redis_client.ping.assert_called_once_with()


def test_initialize_with_unreachable_redis(redis_client):
    """Ensure an unreachable Redis raises DataStoreError at construction."""
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection refused')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis:6379/0"):
        ShortURLRedisDAO(redis_client=redis_client)


# -------------------------------
# 2. Insertion behavior
# -------------------------------


def test_insert_short_url(dao, redis_client):
    """Ensure insert writes the mapping and then the target index, both with NX."""
    redis_client.set.return_value = True

    result = dao.insert(ShortURLModel(target=TARGET, shortcode='abc123'))

    assert result is dao
    assert redis_client.set.call_args_list == [
        call('testapp:test:links:abc123:url', TARGET, nx=True),
        call(TARGET_INDEX_KEY, 'abc123', nx=True),
    ]


def test_insert_short_url_which_already_exists(dao, redis_client):
    """Ensure duplicate shortcodes raise ShortURLAlreadyExistsError and leave the index alone."""
    redis_client.set.return_value = None

    with pytest.raises(ShortURLAlreadyExistsError, match=re.escape("Short URL with code 'abc123' already exists.")):
        dao.insert(ShortURLModel(target=TARGET, shortcode='abc123'))

    redis_client.set.assert_called_once_with('testapp:test:links:abc123:url', TARGET, nx=True)


def test_insert_short_url_with_invalid_type(dao):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert('https://example.com/notamodel')


def test_insert_short_url_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')
    redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert(ShortURLModel(target=TARGET, shortcode='abc123'))


def test_insert_short_url_with_redis_timeout(dao, redis_client):
    """Ensure Redis timeouts during insert raise DataStoreError."""
    redis_client.set.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')

    with pytest.raises(DataStoreError, match='Timed out talking to Redis at redis:6379/0.'):
        dao.insert(ShortURLModel(target=TARGET, shortcode='abc123'))


# -------------------------------
# 3. Retrieval by shortcode
# -------------------------------


def test_get_short_url(dao, redis_client):
    """Ensure fetching a stored shortcode returns its mapping."""
    redis_client.get.return_value = TARGET

    short_url = dao.get('abc123')

    assert short_url == ShortURLModel(target=TARGET, shortcode='abc123')
    redis_client.get.assert_called_once_with('testapp:test:links:abc123:url')


def test_get_short_url_decodes_bytes(dao, redis_client):
    """Ensure bytes responses (decode_responses=False) are decoded."""
    redis_client.get.return_value = TARGET.encode('utf-8')
    assert dao.get('abc123').target == TARGET


def test_get_short_url_not_found(dao, redis_client):
    """Ensure missing shortcodes raise ShortURLNotFoundError."""
    redis_client.get.return_value = None

    with pytest.raises(ShortURLNotFoundError, match=re.escape("Short URL with code 'nope' not found.")):
        dao.get('nope')


def test_get_short_url_with_invalid_type(dao):
    """Ensure non-string shortcodes raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(123)


def test_get_short_url_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during get raise DataStoreError."""
    redis_client.get.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        dao.get('abc123')


# -------------------------------
# 4. Retrieval by target
# -------------------------------


def test_find_by_target(dao, redis_client):
    """Ensure an indexed target resolves to its mapping."""
    redis_client.get.side_effect = ['abc123', TARGET]

    short_url = dao.find_by_target(TARGET)

    assert short_url == ShortURLModel(target=TARGET, shortcode='abc123')
    assert redis_client.get.call_args_list == [
        call(TARGET_INDEX_KEY),
        call('testapp:test:links:abc123:url'),
    ]


def test_find_by_target_not_indexed(dao, redis_client):
    """Ensure a target without index entry raises ShortURLNotFoundError."""
    redis_client.get.return_value = None

    with pytest.raises(ShortURLNotFoundError):
        dao.find_by_target(TARGET)


def test_find_by_target_with_mismatching_mapping(dao, redis_client):
    """Ensure an index entry pointing at another target is not trusted."""
    redis_client.get.side_effect = ['abc123', 'https://example.com/other']

    with pytest.raises(ShortURLNotFoundError):
        dao.find_by_target(TARGET)


# -------------------------------
# 5. Table lifecycle
# -------------------------------


def test_create_table_healthchecks_redis(dao, redis_client):
    """Ensure create_table() only pings Redis."""
    redis_client.ping.reset_mock()
    dao.create_table()
    redis_client.ping.assert_called_once_with()


def test_drop_table_deletes_keys_under_prefix(dao, redis_client):
    """Ensure drop_table() scans both key families and deletes what it finds."""
    redis_client.scan_iter.side_effect = [
        iter(['testapp:test:links:abc123:url']),
        iter([]),
    ]
    redis_client.delete.return_value = 1

    dao.drop_table()

    assert redis_client.scan_iter.call_args_list == [
        call(match='testapp:test:links:*'),
        call(match='testapp:test:targets:*'),
    ]
    redis_client.delete.assert_called_once_with('testapp:test:links:abc123:url')
