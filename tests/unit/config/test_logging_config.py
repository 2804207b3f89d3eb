# nosec B101


import json
import logging
import pytest
import sys
from decimal import Decimal

from config.logging_config import JSONFormatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_configure_logging_console(restore_root_logger):
    configure_logging('debug')

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert not isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger('httpx').level == logging.WARNING


def test_configure_logging_json(restore_root_logger):
    configure_logging('WARNING', json_output=True)

    assert restore_root_logger.level == logging.WARNING
    assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)


def test_json_formatter_serializes_decimal_extra_data():
    record = logging.LogRecord('poller', logging.INFO, __file__, 10, 'rate %s', ('EUR',), None)
    record.extra_data = {'rate': Decimal('0.92')}

    entry = json.loads(JSONFormatter().format(record))

    assert entry['message'] == 'rate EUR'
    assert entry['level'] == 'INFO'
    assert entry['data'] == {'rate': '0.92'}


def test_json_formatter_includes_exception():
    try:
        raise ValueError('bad rate')
    except ValueError:
        record = logging.LogRecord('poller', logging.ERROR, __file__, 10, 'failed', (), sys.exc_info())

    entry = json.loads(JSONFormatter().format(record))

    assert entry['exception']['type'] == 'ValueError'
    assert entry['exception']['message'] == 'bad rate'
