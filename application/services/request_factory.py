from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar('T')


class RequestFactory(Generic[T]):
	"""Produces a fresh request each time a poll task ticks."""

	def __init__(self, get_request: Callable[[], Awaitable[T]]):
		self._get_request = get_request

	def produce(self) -> Awaitable[T]:
		return self._get_request()
