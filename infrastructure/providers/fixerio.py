from decimal import Decimal

import httpx

from domain.exceptions.currency import ProviderError
from domain.models.currency import CurrencyInfo


class FixerIOProvider:
	BASE_URL = 'http://data.fixer.io/api'

	def __init__(self, api_key: str, client: httpx.AsyncClient | None = None, timeout: int = 10):
		self.api_key = api_key
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'fixerio'

	async def _request(self, endpoint: str, params: dict) -> dict:
		params['access_key'] = self.api_key
		url = f'{self.BASE_URL}/{endpoint}'

		try:
			response = await self._client.get(url, params=params)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise ProviderError(
				f'Fixer.io HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise ProviderError(f'Fixer.io request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise ProviderError(f'Fixer.io response parsing error: {str(e)}') from e

		if not isinstance(data, dict) or not data.get('success', False):
			error = data.get('error', {}) if isinstance(data, dict) else {}
			raise ProviderError(f"Fixer.io API error: {error.get('info', 'Unknown error')}")

		return data

	async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
		data = await self._request('latest', {'base': base_currency})
		try:
			return {
				code: Decimal(str(rate))
				for code, rate in data['rates'].items()
				if code != base_currency
			}
		except (KeyError, AttributeError, ArithmeticError) as e:
			raise ProviderError(f'Malformed rates for {base_currency}') from e

	async def fetch_currency_info(self) -> dict[str, CurrencyInfo]:
		data = await self._request('symbols', {})
		try:
			return {
				code: CurrencyInfo(code=code, name=name) for code, name in data['symbols'].items()
			}
		except (KeyError, AttributeError) as e:
			raise ProviderError('Malformed symbols response') from e

	async def close(self) -> None:
		await self._client.aclose()
