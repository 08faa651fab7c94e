# snapshare/core/security.py
import jwt
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple
from flask import current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_jwt,
    get_jwt_identity,
)

from snapshare.core.exceptions import AuthError


@dataclass(frozen=True)
class AuthIdentity:
    """Authenticated caller, built once from the verified token claims."""
    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None


def _subject_claims(user: dict) -> Tuple[str, dict]:
    return user['user_id'], {'username': user.get('username'), 'email': user.get('email')}


def issue_token(subject: str, claims: dict, ttl: Optional[timedelta] = None, refresh: bool = False) -> str:
    """
    Signs a session token for `subject`.

    :param subject: user id stored in the `sub` claim
    :param claims: extra public claims (username, email)
    :param ttl: lifetime; falls back to JWT_ACCESS/REFRESH_TOKEN_EXPIRES
    :param refresh: issue a refresh token instead of an access token
    """
    create = create_refresh_token if refresh else create_access_token
    kwargs = {'identity': subject, 'additional_claims': claims}
    if ttl is not None:
        kwargs['expires_delta'] = ttl
    return create(**kwargs)


def issue_tokens(user: dict) -> Tuple[str, str]:
    """Returns an (access, refresh) token pair for a user document."""
    subject, claims = _subject_claims(user)
    access_token = issue_token(subject, claims)
    refresh_token = issue_token(subject, claims, refresh=True)
    return access_token, refresh_token


def _identity_from_claims(payload: dict) -> AuthIdentity:
    identity_claim = current_app.config.get('JWT_IDENTITY_CLAIM', 'sub')
    user_id = payload.get(identity_claim)
    if not user_id:
        raise AuthError("Invalid token payload", error_code='INVALID_TOKEN')
    return AuthIdentity(user_id=str(user_id), username=payload.get('username'), email=payload.get('email'))


def verify_token(token: str, refresh: bool = False) -> AuthIdentity:
    """Decodes a token outside of the request decorators. Raises AuthError when it is unusable."""
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired", error_code='TOKEN_EXPIRED')
    except jwt.PyJWTError:
        raise AuthError("Token is invalid", error_code='INVALID_TOKEN')

    expected_type = 'refresh' if refresh else 'access'
    if payload.get('type') != expected_type:
        article = "a" if refresh else "an"
        raise AuthError(f"Expected {article} {expected_type} token", error_code='INVALID_TOKEN')
    return _identity_from_claims(payload)


def current_identity() -> AuthIdentity:
    """Identity of the caller inside a @jwt_required() view."""
    if get_jwt_identity() is None:
        raise AuthError("Authentication required")
    return _identity_from_claims(get_jwt())
