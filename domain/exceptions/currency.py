class CurrencyException(Exception):
	pass


class InvalidCurrencyError(CurrencyException):
	pass


class ProviderError(CurrencyException):
	pass


class CurrencyManagerInitError(CurrencyException):
	"""Raised when a CurrencyManager cannot load its currency info."""
