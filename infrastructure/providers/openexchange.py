from decimal import Decimal

import httpx

from domain.exceptions.currency import ProviderError
from domain.models.currency import CurrencyInfo


class OpenExchangeProvider:
	BASE_URL = 'https://openexchangerates.org/api'

	def __init__(self, app_id: str, client: httpx.AsyncClient | None = None, timeout: int = 10):
		self.app_id = app_id
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'openexchange'

	async def _request(self, endpoint: str, params: dict) -> dict:
		params['app_id'] = self.app_id
		url = f'{self.BASE_URL}/{endpoint}'

		try:
			response = await self._client.get(url, params=params)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise ProviderError(
				f'OpenExchange HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise ProviderError(f'OpenExchange request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise ProviderError(f'OpenExchange response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise ProviderError('OpenExchange response parsing error: expected a JSON object')
		if data.get('error'):
			message = data.get('description', data.get('message', 'Unknown error'))
			raise ProviderError(f'OpenExchange API error: {message}')

		return data

	async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
		data = await self._request('latest.json', {'base': base_currency})
		try:
			return {
				code: Decimal(str(rate))
				for code, rate in data['rates'].items()
				if code != base_currency
			}
		except (KeyError, AttributeError, ArithmeticError) as e:
			raise ProviderError(f'Malformed rates for {base_currency}') from e

	async def fetch_currency_info(self) -> dict[str, CurrencyInfo]:
		data = await self._request('currencies.json', {})
		return {code: CurrencyInfo(code=code, name=name) for code, name in data.items()}

	async def close(self) -> None:
		await self._client.aclose()
