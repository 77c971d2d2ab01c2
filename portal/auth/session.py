"""
The portal session is a single marker cookie. Whether a request is
authenticated is a pure function of the raw cookie text.
"""
import secrets
from enum import Enum
from typing import Optional

AUTH_COOKIE_NAME = "pricing_portal_auth"
AUTH_COOKIE_MARKER = "1"
AUTH_COOKIE_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


class Session(str, Enum):
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


def session_from_cookie(cookie_value: Optional[str]) -> Session:
    """Map the raw cookie value onto a Session."""
    if cookie_value is not None and secrets.compare_digest(
            cookie_value.encode("utf-8"), AUTH_COOKIE_MARKER.encode("utf-8")):
        return Session.AUTHENTICATED
    return Session.ANONYMOUS


def is_authenticated(cookie_value: Optional[str]) -> bool:
    return session_from_cookie(cookie_value) is Session.AUTHENTICATED
