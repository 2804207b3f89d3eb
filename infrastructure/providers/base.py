from decimal import Decimal
from typing import Protocol, runtime_checkable

from domain.models.currency import CurrencyInfo


@runtime_checkable
class CurrencyServiceProvider(Protocol):
	"""Source of currency info and of rates relative to a base currency."""

	@property
	def name(self) -> str: ...

	async def fetch_currency_info(self) -> dict[str, CurrencyInfo]:
		"""Raises ProviderError when the currency info cannot be fetched or parsed."""
		...

	async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
		"""Rates for every known currency relative to `base_currency`, excluding itself."""
		...

	async def close(self) -> None: ...
