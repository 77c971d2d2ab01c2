"""
Environment-driven configuration.

Values are read from ``os.environ`` at call time so that a ``.env`` file loaded
by ``main.py`` (or a test patching the environment) is always respected.
"""
import os
from typing import Tuple

import pytz

from portal.common.errors import ConfigError
from portal.common.logger import get_logger

logger = get_logger(__name__)

# Used only outside production when ADMIN_USER / ADMIN_PASS are not set
DEV_ADMIN_USER = "admin"
DEV_ADMIN_PASS = "admin123"

CREDENTIAL_KEYS = ("ADMIN_USER", "ADMIN_PASS")
FIRESTORE_KEYS = ("FIREBASE_CREDENTIALS_JSON_CONTENT", "FIREBASE_CREDENTIALS_FILE")


def is_production() -> bool:
    return os.environ.get("ENV", "").lower() == "production"


def get_admin_credentials() -> Tuple[str, str]:
    """
    Resolve the shared portal credentials.

    Returns:
        tuple: (username, password)

    Raises:
        ConfigError: In production, when either variable is unset
    """
    admin_user = os.environ.get("ADMIN_USER")
    admin_pass = os.environ.get("ADMIN_PASS")

    if admin_user and admin_pass:
        return admin_user, admin_pass

    if is_production():
        missing = [key for key in CREDENTIAL_KEYS if not os.environ.get(key)]
        raise ConfigError(missing, subject="Server auth environment variables")

    logger.warning(
        "ADMIN_USER/ADMIN_PASS are not set. Using development fallback credentials (%s/%s).",
        DEV_ADMIN_USER, DEV_ADMIN_PASS,
    )
    return admin_user or DEV_ADMIN_USER, admin_pass or DEV_ADMIN_PASS


def get_export_timezone():
    """Time zone used to date the export filename."""
    return pytz.timezone(os.environ.get("EXPORT_TIMEZONE", "UTC"))
