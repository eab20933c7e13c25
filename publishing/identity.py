"""
Identity resolution.

Credentials are HS256 JWTs signed with ``settings.JWT_SECRET``. A token is
decoded exactly once per request into an ``IdentityRef``, which views then
pass explicitly to every guarded or toggling operation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

from .exceptions import Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityRef:
    """Opaque reference to one user record; compared by primary key only."""

    user_id: int


def issue_token(user):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.pk),
        "username": user.username,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def resolve(token):
    """
    Decode a credential token into an IdentityRef.

    Raises:
        Unauthorized: token missing, malformed, badly signed or expired
    """
    if not token:
        raise Unauthorized()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return IdentityRef(int(payload["sub"]))
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Rejected credential: {e}")
        raise Unauthorized("Invalid token")


def authenticate_request(request, optional=False):
    """
    Resolve the credential attached by CredentialMiddleware.

    With ``optional=True`` an anonymous request yields None instead of
    failing; a credential that is present but invalid still fails.
    """
    credential = getattr(request, "credential", None)
    if not credential and optional:
        return None
    return resolve(credential)
