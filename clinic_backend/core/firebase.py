import logging

import firebase_admin
from firebase_admin import credentials

from clinic_backend.core import config

logger = logging.getLogger(__name__)


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": config.FIREBASE_PROJECT_ID} if config.FIREBASE_PROJECT_ID else None
    if config.FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(config.FIREBASE_CREDENTIALS_PATH)
        logger.info("Firebase Admin initialized from service account file")
    else:
        cred = credentials.ApplicationDefault()
        logger.info("Firebase Admin initialized with application default credentials")
    return firebase_admin.initialize_app(cred, options)
