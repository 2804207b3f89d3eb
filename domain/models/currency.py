import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

logger = logging.getLogger(__name__)

CurrencyCode = str
CurrencyRates = dict[CurrencyCode, Decimal]


@dataclass(frozen=True)
class CurrencyInfo:
	code: CurrencyCode
	name: str
	symbol: str | None = None


@dataclass(frozen=True)
class AugmentedCurrencyRate:
	currency_code: CurrencyCode
	conversion_rate: Decimal
	info: CurrencyInfo

	@classmethod
	def for_currency(
		cls,
		currency_code: CurrencyCode,
		conversion_rate: Decimal,
		currency_info: Mapping[CurrencyCode, CurrencyInfo],
	) -> 'AugmentedCurrencyRate | None':
		"""Join a rate with its currency info, or None if the code is unknown."""
		info = currency_info.get(currency_code)
		if info is None:
			return None
		return cls(currency_code=currency_code, conversion_rate=conversion_rate, info=info)

	@property
	def name(self) -> str:
		return self.info.name


def identity_rate(
	base_currency: CurrencyCode, currency_info: Mapping[CurrencyCode, CurrencyInfo]
) -> AugmentedCurrencyRate | None:
	return AugmentedCurrencyRate.for_currency(base_currency, Decimal(1), currency_info)


def augment_rates(
	rates: Mapping[CurrencyCode, Decimal], currency_info: Mapping[CurrencyCode, CurrencyInfo]
) -> list[AugmentedCurrencyRate]:
	"""
	Join each rate with its currency info, keeping the order of `rates`.

	Codes missing from `currency_info` are left out of the result.
	"""
	augmented = []
	for code, rate in rates.items():
		entry = AugmentedCurrencyRate.for_currency(code, rate, currency_info)
		if entry is None:
			logger.debug(f'No currency info for {code}, skipping')
			continue
		augmented.append(entry)
	return augmented
