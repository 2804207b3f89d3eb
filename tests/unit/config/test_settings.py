# nosec B101


import pytest
from pydantic import ValidationError

from config.settings import Settings
from infrastructure.providers import (
    BundledCurrencyInfoProvider,
    FixerIOProvider,
    OpenExchangeProvider,
    build_default_provider,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('BASE_CURRENCY', 'POLL_INTERVAL_SECONDS', 'RATES_PROVIDER', 'USE_BUNDLED_CURRENCY_INFO'):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.BASE_CURRENCY == 'USD'
    assert settings.POLL_INTERVAL_SECONDS == 1.0
    assert settings.RATES_PROVIDER == 'openexchange'
    assert settings.USE_BUNDLED_CURRENCY_INFO is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('BASE_CURRENCY', 'EUR')
    monkeypatch.setenv('poll_interval_seconds', '2.5')
    monkeypatch.setenv('RATES_PROVIDER', 'fixerio')

    settings = Settings(_env_file=None)

    assert settings.BASE_CURRENCY == 'EUR'
    assert settings.POLL_INTERVAL_SECONDS == 2.5
    assert settings.RATES_PROVIDER == 'fixerio'


@pytest.mark.parametrize('interval', ['0', '-1'])
def test_poll_interval_must_be_positive(monkeypatch, interval):
    monkeypatch.setenv('POLL_INTERVAL_SECONDS', interval)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_unknown_rates_provider_is_rejected(monkeypatch):
    monkeypatch.setenv('RATES_PROVIDER', 'currencylayer')

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


# ============================================================================
# TEST: build_default_provider()
# ============================================================================

def test_build_default_provider_wraps_openexchange_with_bundled_info():
    provider = build_default_provider(Settings(_env_file=None, OPENEXCHANGE_APP_ID='app'))

    assert isinstance(provider, BundledCurrencyInfoProvider)
    assert isinstance(provider.rates_provider, OpenExchangeProvider)
    assert provider.rates_provider.app_id == 'app'


def test_build_default_provider_fixerio_without_bundled_info():
    settings = Settings(
        _env_file=None,
        RATES_PROVIDER='fixerio',
        FIXERIO_API_KEY='key',
        USE_BUNDLED_CURRENCY_INFO=False,
    )

    provider = build_default_provider(settings)

    assert isinstance(provider, FixerIOProvider)
    assert provider.api_key == 'key'


def test_build_default_provider_uses_custom_info_path(tmp_path):
    path = tmp_path / 'currencies.json'
    settings = Settings(_env_file=None, CURRENCY_INFO_PATH=str(path))

    provider = build_default_provider(settings)

    assert provider.info_path == path
