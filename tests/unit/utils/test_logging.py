"""Unit tests for JSON logging in logging.py

Test coverage includes:
    1. JsonFormatter
       - Ensures records render as JSON with an ISO-8601 UTC timestamp.
       - Ensures `extra` fields are attached and exceptions are formatted.
    2. initialize_logging
       - Ensures the root logger is configured from LOG_LEVEL or the argument.
"""

import sys
import json
import logging

import pytest
from freezegun import freeze_time

from shorturl.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Created short URL.', args=(), exc_info=None, **extra):
    record = logging.LogRecord('shorturl.allocator', logging.INFO, __file__, 1, msg, args, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


@freeze_time('2025-12-26 12:00:00')
def test_json_formatter_basic_fields():
    log = json.loads(JsonFormatter().format(make_record()))

    assert log == {
        'timestamp': '2025-12-26T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'shorturl.allocator',
        'message': 'Created short URL.',
    }


def test_json_formatter_interpolates_args():
    log = json.loads(JsonFormatter().format(make_record('Finished %s.', args=('init-table',))))
    assert log['message'] == 'Finished init-table.'


def test_json_formatter_attaches_extra_fields():
    log = json.loads(JsonFormatter().format(make_record(shortcode='q3ZbT0xA', event='short_url_created')))

    assert log['shortcode'] == 'q3ZbT0xA'
    assert log['event'] == 'short_url_created'


def test_json_formatter_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(make_record(attempts=2, path=object())))
    assert log['attempts'] == 2
    assert log['path'].startswith('<object object')


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record('Failed.', exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. initialize_logging
# -------------------------------


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.mark.usefixtures('_restore_root_logger')
def test_initialize_logging_from_environment(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    initialize_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


@pytest.mark.usefixtures('_restore_root_logger')
def test_initialize_logging_explicit_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')

    initialize_logging('warning')

    assert logging.getLogger().level == logging.WARNING
