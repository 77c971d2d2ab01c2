import secrets

from fastapi import Response

from portal.auth.session import AUTH_COOKIE_MARKER, AUTH_COOKIE_MAX_AGE, AUTH_COOKIE_NAME
from portal.common.config import get_admin_credentials, is_production
from portal.common.errors import AuthError
from portal.common.logger import get_logger

logger = get_logger(__name__)


def _matches(supplied: str, expected: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def verify_credentials(username: str, password: str) -> None:
    """
    Check the supplied pair against the configured shared credential.

    Both values are always compared so the failure does not reveal which one
    was wrong.

    Raises:
        ConfigError: If the credential is not configured in production
        AuthError: If either value does not match
    """
    admin_user, admin_pass = get_admin_credentials()

    user_ok = _matches(username, admin_user)
    pass_ok = _matches(password, admin_pass)
    if not (user_ok and pass_ok):
        logger.warning("Rejected portal login attempt")
        raise AuthError("Invalid credentials")


def set_session_cookie(response: Response) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=AUTH_COOKIE_MARKER,
        max_age=AUTH_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=is_production(),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=is_production(),
    )


def login(username: str, password: str, response: Response) -> None:
    """Verify the credential and mark the response as authenticated."""
    verify_credentials(username, password)
    set_session_cookie(response)
    logger.info("Portal login succeeded")


def logout(response: Response) -> None:
    clear_session_cookie(response)
