from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	APP_NAME: str = 'Currency Rate Poller'

	# Polling
	BASE_CURRENCY: str = 'USD'
	POLL_INTERVAL_SECONDS: float = Field(default=1.0, gt=0)

	# Providers
	RATES_PROVIDER: Literal['openexchange', 'fixerio'] = 'openexchange'
	OPENEXCHANGE_APP_ID: str = ''
	FIXERIO_API_KEY: str = ''
	REQUEST_TIMEOUT: int = Field(default=10, gt=0)
	USE_BUNDLED_CURRENCY_INFO: bool = True
	CURRENCY_INFO_PATH: str | None = None

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
