from config.settings import Settings, get_settings

from .base import CurrencyServiceProvider
from .bundled import BundledCurrencyInfoProvider, load_currency_info
from .fixerio import FixerIOProvider
from .openexchange import OpenExchangeProvider


def build_default_provider(settings: Settings | None = None) -> CurrencyServiceProvider:
	"""Build the provider selected by RATES_PROVIDER, optionally with bundled currency info."""
	settings = settings or get_settings()

	rates_provider: CurrencyServiceProvider
	if settings.RATES_PROVIDER == 'fixerio':
		rates_provider = FixerIOProvider(settings.FIXERIO_API_KEY, timeout=settings.REQUEST_TIMEOUT)
	else:
		rates_provider = OpenExchangeProvider(settings.OPENEXCHANGE_APP_ID, timeout=settings.REQUEST_TIMEOUT)

	if settings.USE_BUNDLED_CURRENCY_INFO:
		return BundledCurrencyInfoProvider(rates_provider, info_path=settings.CURRENCY_INFO_PATH)
	return rates_provider


__all__ = [
	'BundledCurrencyInfoProvider',
	'CurrencyServiceProvider',
	'FixerIOProvider',
	'OpenExchangeProvider',
	'build_default_provider',
	'load_currency_info',
]
