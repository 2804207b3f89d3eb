import asyncio
import logging
import math
from collections.abc import Callable
from datetime import timedelta
from typing import Generic, TypeVar

from application.services.request_factory import RequestFactory

T = TypeVar('T')

logger = logging.getLogger(__name__)


def _discard_result(request: asyncio.Future) -> None:
	if request.cancelled():
		return
	error = request.exception()
	if error is not None:
		logger.debug(f'Request finished after its poll task stopped: {error}')


class PollAsyncTask(Generic[T]):
	"""
	Runs a request on a fixed interval and hands each successful result to `completion`.

	The first tick runs as soon as the task is started. Ticks never overlap: a
	request that is still running when the next tick is due delays it, and
	ticks missed in the meantime are skipped. Failed requests are logged and
	dropped. Once stopped, a task never calls `completion` again and cannot
	be restarted.
	"""

	def __init__(
		self,
		request_factory: RequestFactory[T],
		completion: Callable[[T], None],
		interval: float | timedelta,
		*,
		name: str | None = None,
	):
		if isinstance(interval, timedelta):
			interval = interval.total_seconds()
		if interval <= 0:
			raise ValueError(f'Poll interval must be positive, got {interval}')

		self.request_factory = request_factory
		self.completion = completion
		self.interval = float(interval)
		self.name = name or 'poll-task'
		self.tick_count = 0
		self._task: asyncio.Task | None = None
		self._stopped = False

	@property
	def is_running(self) -> bool:
		return self._task is not None and not self._stopped

	def start(self) -> None:
		"""Start ticking on the running event loop. Does nothing if already started."""
		if self._stopped:
			raise RuntimeError(f'{self.name} has been stopped and cannot be restarted')
		if self._task is not None:
			return

		self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
		logger.debug(f'{self.name} started, polling every {self.interval}s')

	def stop(self) -> None:
		if self._stopped:
			return
		self._stopped = True
		if self._task is not None:
			self._task.cancel()
		logger.debug(f'{self.name} stopped after {self.tick_count} tick(s)')

	async def wait_closed(self) -> None:
		"""Wait for the polling loop to exit after `stop()`."""
		if self._task is not None:
			await asyncio.wait([self._task])

	async def _run(self) -> None:
		loop = asyncio.get_running_loop()
		next_tick = loop.time()

		while not self._stopped:
			await self._tick()

			next_tick += self.interval
			now = loop.time()
			if now > next_tick:
				skipped = math.ceil((now - next_tick) / self.interval)
				logger.debug(f'{self.name} request overran, skipping {skipped} tick(s)')
				next_tick += skipped * self.interval
			await asyncio.sleep(next_tick - now)

	async def _request(self) -> T:
		return await self.request_factory.produce()

	async def _tick(self) -> None:
		self.tick_count += 1
		request = asyncio.ensure_future(self._request())

		try:
			result = await asyncio.shield(request)
		except asyncio.CancelledError:
			if request.cancelled() and not self._stopped:
				logger.warning(f'{self.name} tick #{self.tick_count} failed: request was cancelled')
				return
			# the request keeps running, its outcome is never delivered
			request.add_done_callback(_discard_result)
			raise
		except Exception as e:
			logger.warning(f'{self.name} tick #{self.tick_count} failed: {e}')
			return

		if self._stopped:
			logger.debug(f'{self.name} dropping result of tick #{self.tick_count}, task was stopped')
			return

		try:
			self.completion(result)
		except Exception:
			logger.exception(f'{self.name} completion failed on tick #{self.tick_count}')
