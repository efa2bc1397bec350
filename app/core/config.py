import os
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class Environment(str, Enum):
    TEST = 'test'
    PRODUCTION = 'production'
    DEVELOP = 'develop'


class AuthProvider(str, Enum):
    JWT = 'jwt'
    REMOTE = 'remote'


class ConfigurationError(Exception):
    pass


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
}


class Settings:
    ENVIRONMENT: Environment = Environment(os.getenv('ENVIRONMENT') or Environment.TEST)
    DB_USERNAME: str = os.getenv('DB_USERNAME')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD')
    DB_HOST: str = os.getenv('DB_HOST')
    DB_PORT: str = os.getenv('DB_PORT')
    DB_NAME: str = os.getenv('DB_NAME')

    SQLALCHEMY_TEST_DATABASE_URL = 'sqlite:///:memory:'
    DATABASE_URL: str = (
        f'postgresql://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}'
        if ENVIRONMENT != Environment.TEST
        else SQLALCHEMY_TEST_DATABASE_URL
    )

    SECRET_KEY: str = os.getenv('SECRET_KEY', '')
    QR_SIGNING_SECRET: str = os.getenv('QR_SIGNING_SECRET', '')

    AUTH_PROVIDER: AuthProvider = AuthProvider(
        os.getenv('AUTH_PROVIDER') or AuthProvider.JWT
    )
    AUTH_URL: str = os.getenv('AUTH_URL')
    AUTH_API_KEY: str = os.getenv('AUTH_API_KEY')

    CHECK_IN_TIMEOUT_SECONDS: float = float(os.getenv('CHECK_IN_TIMEOUT_SECONDS', 10))

    def validate(self) -> None:
        """Fail fast when a secret the check-in pipeline depends on is absent."""
        required = ['SECRET_KEY', 'QR_SIGNING_SECRET']
        if self.AUTH_PROVIDER == AuthProvider.REMOTE:
            required += ['AUTH_URL', 'AUTH_API_KEY']

        missing = [name for name in required if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f'Missing required configuration: {", ".join(missing)}'
            )


settings = Settings()


def get_settings() -> Settings:
    return settings
