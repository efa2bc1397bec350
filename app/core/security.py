from datetime import timedelta
from functools import lru_cache
from typing import Optional

import requests
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from app.core.config import AuthProvider, settings
from app.core.exceptions.check_in_exceptions import Unauthenticated
from app.core.logger import logger
from app.core.utils import current_time


class TokenData(BaseModel):
    user_id: str
    email: str


# Constants
ALGORITHM = 'HS256'
ACCESS_TOKEN_EXPIRE_MINUTES = 60
REFRESH_TOKEN_EXPIRE_DAYS = 7

ACCESS_TOKEN_TYPE = 'access'
REFRESH_TOKEN_TYPE = 'refresh'


def _encode(data: dict, token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({'type': token_type, 'exp': current_time() + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(data, REFRESH_TOKEN_TYPE, expires_delta)


class IdentityProvider:
    """Exchanges credentials for a user identity."""

    def get_user(self, access_token: str) -> TokenData:
        raise NotImplementedError

    def refresh_session(self, refresh_token: str) -> TokenData:
        raise NotImplementedError


class JWTIdentityProvider(IdentityProvider):
    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    def _decode(self, token: str, token_type: str) -> TokenData:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            logger.error('Token has expired')
            raise Unauthenticated('Token has expired')
        except JWTError as e:
            logger.error('Error decoding token: %s', str(e))
            raise Unauthenticated()

        user_id = payload.get('user_id')
        email = payload.get('email')
        if payload.get('type') != token_type or user_id is None or email is None:
            logger.error('Invalid token payload for %s token', token_type)
            raise Unauthenticated()

        return TokenData(user_id=str(user_id), email=email)

    def get_user(self, access_token: str) -> TokenData:
        return self._decode(access_token, ACCESS_TOKEN_TYPE)

    def refresh_session(self, refresh_token: str) -> TokenData:
        return self._decode(refresh_token, REFRESH_TOKEN_TYPE)


class RemoteIdentityProvider(IdentityProvider):
    """Hosted auth service speaking the `/auth/v1` REST dialect."""

    def __init__(self, auth_url: str, api_key: str, timeout: float = 5):
        self.auth_url = auth_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

    @staticmethod
    def _to_token_data(user: Optional[dict]) -> TokenData:
        if not user or not user.get('id'):
            logger.error('Identity provider returned no user')
            raise Unauthenticated()
        return TokenData(user_id=str(user['id']), email=user.get('email') or '')

    def get_user(self, access_token: str) -> TokenData:
        url = f'{self.auth_url}/auth/v1/user'
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {access_token}',
        }
        response = requests.get(url, headers=headers, timeout=self.timeout)
        if response.status_code != 200:
            logger.error('Identity provider rejected token: %s', response.status_code)
            raise Unauthenticated()
        return self._to_token_data(response.json())

    def refresh_session(self, refresh_token: str) -> TokenData:
        url = f'{self.auth_url}/auth/v1/token'
        headers = {'apikey': self.api_key, 'Content-Type': 'application/json'}
        response = requests.post(
            url,
            params={'grant_type': 'refresh_token'},
            json={'refresh_token': refresh_token},
            headers=headers,
            timeout=self.timeout,
        )
        if response.status_code != 200:
            logger.error('Session refresh failed: %s', response.status_code)
            raise Unauthenticated('Invalid or expired session')
        return self._to_token_data(response.json().get('user'))


@lru_cache()
def get_identity_provider() -> IdentityProvider:
    if settings.AUTH_PROVIDER == AuthProvider.REMOTE:
        return RemoteIdentityProvider(settings.AUTH_URL, settings.AUTH_API_KEY)
    return JWTIdentityProvider(settings.SECRET_KEY)


def authenticate(
    identity_provider: IdentityProvider,
    authorization: Optional[str],
    refresh_token: Optional[str] = None,
) -> TokenData:
    """
    Resolve the caller from a bearer credential.

    A rejected access token gets exactly one refresh attempt, and only when the
    client sent a refresh token.
    """
    if not authorization or not authorization.startswith('Bearer '):
        raise Unauthenticated('Authorization header missing')

    access_token = authorization[len('Bearer ') :].strip()
    if not access_token:
        raise Unauthenticated('Authorization header missing')

    try:
        return identity_provider.get_user(access_token)
    except Unauthenticated:
        if not refresh_token:
            raise
        logger.info('Access token rejected, attempting session refresh')

    try:
        return identity_provider.refresh_session(refresh_token)
    except Unauthenticated:
        raise Unauthenticated('Invalid or expired session')
