import logging
import weakref
from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import Protocol

from application.services.poll_task import PollAsyncTask
from application.services.request_factory import RequestFactory
from domain.exceptions.currency import CurrencyManagerInitError, InvalidCurrencyError, ProviderError
from domain.models.currency import (
	AugmentedCurrencyRate,
	CurrencyCode,
	CurrencyInfo,
	CurrencyRates,
	augment_rates,
	identity_rate,
)
from infrastructure.providers import build_default_provider
from infrastructure.providers.base import CurrencyServiceProvider

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


class CurrencyManagerListener(Protocol):
	def currency_rates_did_change(self, new_currency_rates: list[AugmentedCurrencyRate]) -> None: ...


def _validate_currency_code(code: CurrencyCode) -> None:
	if not isinstance(code, str) or not code.strip():
		raise InvalidCurrencyError(f'Invalid currency code: {code!r}')


class CurrencyManager:
	"""
	Continuously fetches augmented currency rates relative to a base currency.

	A single listener can be registered through `listener`; it is held by weak
	reference and receives one notification per successful poll. The payload
	starts with the base currency itself (rate 1) when its info is known,
	followed by the polled rates joined with their currency info.

	Changing the base currency replaces the poll task. Rates fetched for the
	previous base currency are never delivered once `set_base_currency`
	returns.

	A running poll task keeps the manager alive: call `close()` or
	`stop_polling()` when done, dropping the last reference does not stop it.
	"""

	def __init__(
		self,
		base_currency: CurrencyCode,
		provider: CurrencyServiceProvider,
		currency_info: Mapping[CurrencyCode, CurrencyInfo],
		*,
		poll_interval: float | timedelta = DEFAULT_POLL_INTERVAL,
	):
		if not currency_info:
			raise CurrencyManagerInitError('Currency info is empty')
		_validate_currency_code(base_currency)

		self.provider = provider
		self.poll_interval = poll_interval
		self._currency_info = MappingProxyType(dict(currency_info))
		self._base_currency = base_currency
		self._poll_task: PollAsyncTask[CurrencyRates] | None = None
		self._generation = 0
		self._listener_ref: weakref.ref | None = None

	@classmethod
	async def create(
		cls,
		base_currency: CurrencyCode,
		provider: CurrencyServiceProvider | None = None,
		*,
		poll_interval: float | timedelta = DEFAULT_POLL_INTERVAL,
	) -> 'CurrencyManager':
		"""
		Load the currency info from `provider` and build a manager.

		Raises CurrencyManagerInitError if the currency info cannot be fetched
		or is empty. A provider built here is closed again on failure.
		"""
		_validate_currency_code(base_currency)
		owns_provider = provider is None
		if provider is None:
			provider = build_default_provider()

		try:
			currency_info = await provider.fetch_currency_info()
			manager = cls(base_currency, provider, currency_info, poll_interval=poll_interval)
		except ProviderError as e:
			logger.error(f'Failed to fetch currency info from {provider.name}: {e}')
			if owns_provider:
				await provider.close()
			raise CurrencyManagerInitError(f'Currency info unavailable from {provider.name}') from e
		except CurrencyManagerInitError:
			logger.error(f'{provider.name} returned no currency info')
			if owns_provider:
				await provider.close()
			raise

		logger.info(f'CurrencyManager ready: base={base_currency}, {len(currency_info)} currencies')
		return manager

	@property
	def base_currency(self) -> CurrencyCode:
		return self._base_currency

	@property
	def currency_info(self) -> Mapping[CurrencyCode, CurrencyInfo]:
		return self._currency_info

	@property
	def is_polling(self) -> bool:
		return self._poll_task is not None and self._poll_task.is_running

	@property
	def listener(self) -> CurrencyManagerListener | None:
		if self._listener_ref is None:
			return None
		return self._listener_ref()

	@listener.setter
	def listener(self, listener: CurrencyManagerListener | None) -> None:
		self._listener_ref = weakref.ref(listener) if listener is not None else None

	def start_polling(self) -> None:
		self._replace_poll_task()

	def stop_polling(self) -> None:
		if self._poll_task is not None:
			self._poll_task.stop()
			self._poll_task = None
		self._generation += 1

	def set_base_currency(self, base_currency: CurrencyCode) -> None:
		"""Switch to a new base currency and restart polling with it."""
		_validate_currency_code(base_currency)
		logger.info(f'Base currency changed: {self._base_currency} -> {base_currency}')
		self._base_currency = base_currency
		self._replace_poll_task()

	def get_current_currency_rate(self) -> AugmentedCurrencyRate | None:
		return identity_rate(self._base_currency, self._currency_info)

	async def close(self) -> None:
		poll_task = self._poll_task
		self.stop_polling()
		if poll_task is not None:
			await poll_task.wait_closed()
		await self.provider.close()

	def _replace_poll_task(self) -> None:
		self.stop_polling()

		base_currency = self._base_currency
		generation = self._generation
		request_factory = RequestFactory(lambda: self.provider.fetch_rates(base_currency))

		self._poll_task = PollAsyncTask(
			request_factory,
			completion=lambda rates: self._notify(rates, base_currency, generation),
			interval=self.poll_interval,
			name=f'currency-poll-{base_currency}',
		)
		self._poll_task.start()

	def _notify(self, rates: CurrencyRates, base_currency: CurrencyCode, generation: int) -> None:
		if generation != self._generation:
			logger.debug(f'Dropping stale rates for {base_currency}')
			return

		listener = self.listener
		if listener is None:
			return

		new_currency_rates = []
		current_rate = identity_rate(base_currency, self._currency_info)
		if current_rate is not None:
			new_currency_rates.append(current_rate)
		new_currency_rates.extend(augment_rates(rates, self._currency_info))

		listener.currency_rates_did_change(new_currency_rates)
