from .currency_manager import CurrencyManager, CurrencyManagerListener
from .poll_task import PollAsyncTask
from .request_factory import RequestFactory

__all__ = ['CurrencyManager', 'CurrencyManagerListener', 'PollAsyncTask', 'RequestFactory']
