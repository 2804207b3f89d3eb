import json
from decimal import Decimal
from pathlib import Path

from domain.exceptions.currency import ProviderError
from domain.models.currency import CurrencyInfo
from infrastructure.providers.base import CurrencyServiceProvider

DEFAULT_CURRENCY_INFO_PATH = Path(__file__).parent / 'data' / 'currencies.json'


def load_currency_info(path: str | Path) -> dict[str, CurrencyInfo]:
	"""
	Read currency info from a JSON file.

	The file maps each currency code to an object with a `name` and an
	optional `symbol`, e.g. `{"USD": {"name": "US Dollar", "symbol": "$"}}`.
	"""
	path = Path(path)
	try:
		raw = json.loads(path.read_text(encoding='utf-8'))
	except OSError as e:
		raise ProviderError(f'Cannot read currency info from {path}: {e}') from e
	except ValueError as e:
		raise ProviderError(f'Invalid currency info JSON in {path}: {e}') from e

	if not isinstance(raw, dict):
		raise ProviderError(f'Currency info in {path} must be a JSON object')

	currency_info = {}
	for code, entry in raw.items():
		try:
			currency_info[code] = CurrencyInfo(code=code, name=entry['name'], symbol=entry.get('symbol'))
		except (KeyError, TypeError, AttributeError) as e:
			raise ProviderError(f'Invalid currency info entry for {code} in {path}') from e
	return currency_info


class BundledCurrencyInfoProvider:
	"""Serves currency info from a local JSON file and rates from another provider."""

	def __init__(self, rates_provider: CurrencyServiceProvider, info_path: str | Path | None = None):
		self.rates_provider = rates_provider
		self.info_path = Path(info_path) if info_path else DEFAULT_CURRENCY_INFO_PATH

	@property
	def name(self) -> str:
		return f'bundled+{self.rates_provider.name}'

	async def fetch_currency_info(self) -> dict[str, CurrencyInfo]:
		return load_currency_info(self.info_path)

	async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
		return await self.rates_provider.fetch_rates(base_currency)

	async def close(self) -> None:
		await self.rates_provider.close()
