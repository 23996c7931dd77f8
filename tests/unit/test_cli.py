"""Unit tests for the shorturl command-line interface

Test coverage includes:
    1. create / read
       - Ensures results are printed as JSON and mapped onto exit codes.
    2. Table lifecycle
       - Ensures init-table and drop-table call the configured DAO.
       - Ensures drop-table clears the resolution cache so no stale mapping survives.
    3. Failures
       - Ensures configuration and data store failures exit with status 1.
       - Ensures a missing subcommand is a usage error.
"""

import json
import textwrap
from unittest.mock import MagicMock, patch

import pytest

from shorturl import ShortURLAllocator, cli
from shorturl.dao.base import ResolutionCacheBaseDAO, ShortURLBaseDAO
from shorturl.dao.cache import ResolutionCacheMemoryDAO
from shorturl.dao.memory import ShortURLMemoryDAO
from shorturl.dao.exceptions import DataStoreError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep the root logger untouched by the CLI."""
    with patch('shorturl.cli.initialize_logging'):
        yield


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'test.yaml'
    path.write_text(
        textwrap.dedent(
            """
            active_backend: memory
            shortener:
              short_url_prefix: https://sho.rt/
            """
        ),
        encoding='utf-8',
    )
    return str(path)


def output(capsys) -> dict:
    return json.loads(capsys.readouterr().out)


# -------------------------------
# 1. create / read
# -------------------------------


def test_create_with_code(config_file, capsys):
    assert cli.main(['--config', config_file, 'create', 'https://example.com/a', '--code', 'abc123']) == 0
    assert output(capsys) == {'code': 0, 'shortUrl': 'https://sho.rt/abc123'}


def test_create_without_code(config_file, capsys):
    assert cli.main(['--config', config_file, 'create', 'https://example.com/a']) == 0
    assert output(capsys)['shortUrl'].startswith('https://sho.rt/')


def test_create_with_invalid_url(config_file, capsys):
    assert cli.main(['--config', config_file, 'create', 'example.com/a']) == 1
    assert output(capsys) == {'code': 1, 'msg': "Invalid long URL format: 'example.com/a'.", 'errorCode': 'input:invalid_long_url'}


def test_read_unknown_code(config_file, capsys):
    assert cli.main(['--config', config_file, 'read', 'abc123']) == 1
    assert output(capsys)['errorCode'] == 'lookup:code_not_found'


def test_read_existing_code(config_file, capsys):
    allocator = MagicMock()
    allocator.read_short_url.return_value.to_dict.return_value = {'code': 0, 'longUrl': 'https://example.com/a'}
    allocator.read_short_url.return_value.ok = True

    with patch('shorturl.cli.create_allocator', return_value=allocator):
        assert cli.main(['--config', config_file, 'read', 'abc123']) == 0

    allocator.read_short_url.assert_called_once_with('abc123')
    assert output(capsys) == {'code': 0, 'longUrl': 'https://example.com/a'}


def test_config_from_environment(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv('CONFIG_DIR', str(tmp_path))
    monkeypatch.setenv('APP_ENV', 'ci')
    (tmp_path / 'ci.yaml').write_text('active_backend: memory\n', encoding='utf-8')

    assert cli.main(['create', 'https://example.com/a', '--code', 'abc123']) == 0
    assert output(capsys)['shortUrl'] == 'http://localhost:3000/abc123'


# -------------------------------
# 2. Table lifecycle
# -------------------------------


@pytest.mark.parametrize('command, method', [('init-table', 'create_table'), ('drop-table', 'drop_table')])
def test_table_lifecycle(config_file, command, method):
    dao = MagicMock(spec=ShortURLBaseDAO)

    with patch('shorturl.cli.create_short_url_dao', return_value=dao):
        assert cli.main(['--config', config_file, command]) == 0

    getattr(dao, method).assert_called_once_with()


def test_drop_table_clears_resolution_cache(config_file):
    dao = MagicMock(spec=ShortURLBaseDAO)
    cache = MagicMock(spec=ResolutionCacheBaseDAO)

    with (
        patch('shorturl.cli.create_short_url_dao', return_value=dao),
        patch('shorturl.cli.create_resolution_cache', return_value=cache),
    ):
        assert cli.main(['--config', config_file, 'drop-table']) == 0

    dao.drop_table.assert_called_once_with()
    cache.clear.assert_called_once_with()


def test_init_table_keeps_resolution_cache(config_file):
    with (
        patch('shorturl.cli.create_short_url_dao', return_value=MagicMock(spec=ShortURLBaseDAO)),
        patch('shorturl.cli.create_resolution_cache') as create_cache_mock,
    ):
        assert cli.main(['--config', config_file, 'init-table']) == 0

    create_cache_mock.assert_not_called()


def test_drop_table_leaves_no_stale_mapping(config_file, capsys):
    """Ensure a code re-claimed after drop-table is never handed out for its old URL."""
    dao = ShortURLMemoryDAO()
    cache = ResolutionCacheMemoryDAO()
    codes = iter(['first001', 'second02'])
    allocator = ShortURLAllocator(dao=dao, cache=cache, short_url_prefix='https://sho.rt/', generator=lambda length: next(codes))

    with (
        patch('shorturl.cli.create_allocator', return_value=allocator),
        patch('shorturl.cli.create_short_url_dao', return_value=dao),
        patch('shorturl.cli.create_resolution_cache', return_value=cache),
    ):
        cli.main(['--config', config_file, 'create', 'https://x.example/'])
        cli.main(['--config', config_file, 'create', 'https://x.example/'])
        assert cli.main(['--config', config_file, 'drop-table']) == 0
        cli.main(['--config', config_file, 'create', 'https://y.example/', '--code', 'first001'])
        capsys.readouterr()

        assert cli.main(['--config', config_file, 'create', 'https://x.example/']) == 0
        assert output(capsys) == {'code': 0, 'shortUrl': 'https://sho.rt/second02'}

    assert len(cache) == 2
    assert allocator.read_short_url('second02').long_url == 'https://x.example/'
    assert allocator.read_short_url('first001').long_url == 'https://y.example/'


# -------------------------------
# 3. Failures
# -------------------------------


def test_missing_config_file(tmp_path, capsys):
    assert cli.main(['--config', str(tmp_path / 'missing.yaml'), 'read', 'abc123']) == 1
    assert capsys.readouterr().out == ''


def test_bad_config_file(tmp_path):
    path = tmp_path / 'bad.yaml'
    path.write_text('active_backend: postgres\n', encoding='utf-8')

    assert cli.main(['--config', str(path), 'read', 'abc123']) == 1


def test_unreachable_data_store(config_file):
    with patch('shorturl.cli.create_allocator', side_effect=DataStoreError("Can't connect to Redis at redis:6379/0.")):
        assert cli.main(['--config', config_file, 'create', 'https://example.com/a']) == 1


def test_missing_command():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2
