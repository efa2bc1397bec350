"""
Signed ticket tokens encoded in QR codes.

Wire format: ``v1.<ticket_code>.<signature>`` where the signature is the first
16 hex characters of HMAC-SHA256(secret, ticket_code). The truncation keeps QR
payloads small and must stay at 16 characters for already issued tickets.
"""

import hashlib
import hmac
import secrets
from typing import NamedTuple, Optional

TOKEN_VERSION = 'v1'
SIGNATURE_LENGTH = 16
TICKET_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


class TokenVerification(NamedTuple):
    valid: bool
    ticket_code: Optional[str] = None


def sign(secret: str, ticket_code: str) -> str:
    return hmac.new(
        secret.encode(), ticket_code.encode(), hashlib.sha256
    ).hexdigest()


def sign_as_token(secret: str, ticket_code: str) -> str:
    signature = sign(secret, ticket_code)[:SIGNATURE_LENGTH]
    return f'{TOKEN_VERSION}.{ticket_code}.{signature}'


def verify(secret: str, token: str) -> TokenVerification:
    """Check format and signature. Failures carry no reason."""
    parts = token.split('.')
    if len(parts) != 3:
        return TokenVerification(valid=False)

    version, ticket_code, signature = parts
    if version != TOKEN_VERSION or not ticket_code:
        return TokenVerification(valid=False)

    expected = sign(secret, ticket_code)[:SIGNATURE_LENGTH]
    if not hmac.compare_digest(signature.encode(), expected.encode()):
        return TokenVerification(valid=False)

    return TokenVerification(valid=True, ticket_code=ticket_code)


def generate_ticket_code(length: int = 24) -> str:
    return ''.join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(length))
