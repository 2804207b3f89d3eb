import asyncio
import logging
import signal
import sys

from application.services import CurrencyManager
from config.logging_config import configure_logging
from config.settings import get_settings
from domain.exceptions.currency import CurrencyManagerInitError
from domain.models.currency import AugmentedCurrencyRate

logger = logging.getLogger(__name__)


class LoggingRateListener:
	"""Logs every rate update and remembers the latest one."""

	def __init__(self, max_logged: int = 10):
		"""
		Args:
			max_logged: How many rates of each update to write to the log
		"""
		self.max_logged = max_logged
		self.update_count = 0
		self.latest_rates: list[AugmentedCurrencyRate] = []

	def currency_rates_did_change(self, new_currency_rates: list[AugmentedCurrencyRate]) -> None:
		self.update_count += 1
		self.latest_rates = new_currency_rates

		logger.info(f'Update #{self.update_count}: {len(new_currency_rates)} rates')
		for rate in new_currency_rates[: self.max_logged]:
			logger.info(f'  {rate.currency_code:<4} {rate.conversion_rate:>14} {rate.name}')


class RateWatcher:
	"""
	Background process that keeps a CurrencyManager polling until it is stopped.
	"""

	def __init__(self, manager: CurrencyManager, listener: LoggingRateListener | None = None):
		self.manager = manager
		self.listener = listener or LoggingRateListener()
		self._stop_event = asyncio.Event()

	async def run(self) -> None:
		self.manager.listener = self.listener
		self.manager.start_polling()
		logger.info(
			f'Rate watcher started: base={self.manager.base_currency}, '
			f'interval={self.manager.poll_interval}s, provider={self.manager.provider.name}'
		)

		try:
			await self._stop_event.wait()
		finally:
			await self.manager.close()
			logger.info(f'Rate watcher stopped after {self.listener.update_count} updates')

	def stop(self) -> None:
		logger.info('Stopping rate watcher...')
		self._stop_event.set()


async def main() -> int:
	settings = get_settings()
	configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

	logger.info('=' * 60)
	logger.info(f'{settings.APP_NAME.upper()} STARTING')
	logger.info('=' * 60)

	try:
		manager = await CurrencyManager.create(
			settings.BASE_CURRENCY, poll_interval=settings.POLL_INTERVAL_SECONDS
		)
	except CurrencyManagerInitError as e:
		logger.error(f'Cannot start rate watcher: {e}')
		return 1

	watcher = RateWatcher(manager)

	loop = asyncio.get_running_loop()
	for sig in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(sig, watcher.stop)

	await watcher.run()
	return 0


def cli() -> None:
	sys.exit(asyncio.run(main()))


if __name__ == '__main__':
	cli()
