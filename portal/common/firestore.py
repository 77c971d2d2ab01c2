"""
Firebase app bootstrap and Firestore client creation.
"""
import json
import os

import firebase_admin
from firebase_admin import credentials, firestore

from portal.common.config import FIRESTORE_KEYS
from portal.common.errors import ConfigError
from portal.common.logger import get_logger

logger = get_logger(__name__)


def load_credentials():
    """
    Build Firebase credentials from the environment.

    Priority: FIREBASE_CREDENTIALS_JSON_CONTENT (hosted deployments), then the
    service account file named by FIREBASE_CREDENTIALS_FILE (local development).

    Raises:
        ConfigError: If neither variable is set
        ValueError: If the JSON content cannot be parsed
    """
    cred_json_content = os.environ.get("FIREBASE_CREDENTIALS_JSON_CONTENT")
    if cred_json_content:
        try:
            cred_dict = json.loads(cred_json_content)
        except json.JSONDecodeError as e:
            logger.error("FIREBASE_CREDENTIALS_JSON_CONTENT is set but contains invalid JSON: %s", e)
            raise ValueError("FIREBASE_CREDENTIALS_JSON_CONTENT contains invalid JSON") from e
        logger.info("Using Firebase credentials from FIREBASE_CREDENTIALS_JSON_CONTENT")
        return credentials.Certificate(cred_dict)

    cred_file = os.environ.get("FIREBASE_CREDENTIALS_FILE")
    if cred_file:
        logger.info("Using Firebase credentials from file: %s", cred_file)
        return credentials.Certificate(cred_file)

    raise ConfigError(list(FIRESTORE_KEYS), subject="Document store environment variables")


def connect_firestore():
    """
    Initialize the default Firebase app (once per process) and return a
    Firestore client bound to it.
    """
    try:
        app = firebase_admin.get_app()
    except ValueError:
        options = {}
        project_id = os.environ.get("FIREBASE_PROJECT_ID")
        if project_id:
            options["projectId"] = project_id
        app = firebase_admin.initialize_app(load_credentials(), options or None)
        logger.info("Initialized Firebase app %s", app.name)

    return firestore.client(app)
