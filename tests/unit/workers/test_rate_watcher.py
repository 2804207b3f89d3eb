# nosec B101


import asyncio
import logging
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock, patch

from domain.exceptions.currency import CurrencyManagerInitError
from domain.models.currency import AugmentedCurrencyRate, CurrencyInfo
from workers.rate_watcher import LoggingRateListener, RateWatcher, main


def make_rates():
    return [
        AugmentedCurrencyRate('USD', Decimal(1), CurrencyInfo(code='USD', name='US Dollar')),
        AugmentedCurrencyRate('EUR', Decimal('0.92'), CurrencyInfo(code='EUR', name='Euro')),
    ]


def test_listener_records_latest_rates(caplog):
    listener = LoggingRateListener()

    with caplog.at_level(logging.INFO, logger='workers.rate_watcher'):
        listener.currency_rates_did_change(make_rates())
        listener.currency_rates_did_change(make_rates()[:1])

    assert listener.update_count == 2
    assert [r.currency_code for r in listener.latest_rates] == ['USD']
    assert 'Update #2: 1 rates' in caplog.text
    assert 'Euro' in caplog.text


def test_listener_limits_logged_rates(caplog):
    listener = LoggingRateListener(max_logged=1)

    with caplog.at_level(logging.INFO, logger='workers.rate_watcher'):
        listener.currency_rates_did_change(make_rates())

    assert 'US Dollar' in caplog.text
    assert 'Euro' not in caplog.text


@pytest.mark.asyncio
async def test_watcher_polls_until_stopped():
    manager = Mock()
    manager.base_currency = 'USD'
    manager.poll_interval = 1.0
    manager.provider.name = 'fake'
    manager.close = AsyncMock()
    watcher = RateWatcher(manager)

    run = asyncio.create_task(watcher.run())
    await asyncio.sleep(0.01)

    manager.start_polling.assert_called_once()
    assert manager.listener is watcher.listener
    manager.close.assert_not_awaited()

    watcher.stop()
    await asyncio.wait_for(run, timeout=1)

    manager.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_exits_with_error_when_manager_cannot_start():
    create = AsyncMock(side_effect=CurrencyManagerInitError('no currency info'))

    with patch('workers.rate_watcher.configure_logging'), \
            patch('workers.rate_watcher.CurrencyManager.create', create):
        exit_code = await main()

    assert exit_code == 1
    create.assert_awaited_once()
