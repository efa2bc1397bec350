import pytest

from app.core.config import AuthProvider, ConfigurationError, Settings


def _settings(**overrides):
    config = Settings()
    config.SECRET_KEY = 'secret'
    config.QR_SIGNING_SECRET = 'qr-secret'
    config.AUTH_PROVIDER = AuthProvider.JWT
    config.AUTH_URL = None
    config.AUTH_API_KEY = None
    for name, value in overrides.items():
        setattr(config, name, value)
    return config


def test_complete_configuration_is_valid():
    _settings().validate()


def test_missing_qr_secret_fails_fast():
    with pytest.raises(ConfigurationError) as exc_info:
        _settings(QR_SIGNING_SECRET='').validate()
    assert 'QR_SIGNING_SECRET' in str(exc_info.value)


def test_remote_provider_requires_url_and_key():
    with pytest.raises(ConfigurationError) as exc_info:
        _settings(AUTH_PROVIDER=AuthProvider.REMOTE).validate()
    assert 'AUTH_URL' in str(exc_info.value)
    assert 'AUTH_API_KEY' in str(exc_info.value)

    _settings(
        AUTH_PROVIDER=AuthProvider.REMOTE,
        AUTH_URL='https://auth.test',
        AUTH_API_KEY='anon-key',
    ).validate()
