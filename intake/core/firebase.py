"""
Firebase admin initialization.

The service account JSON is read from FIREBASE_CREDENTIALS. The Firestore
client returned here is owned by the service context built at startup;
nothing is cached at module level apart from the firebase_admin app registry.
"""

import os

import firebase_admin
from firebase_admin import credentials, firestore

from intake.core.logging import get_logger

logger = get_logger(__name__)


def init_firebase(cred_path: str):
    """
    Initialize the Firebase Admin SDK (once per process) and return a
    Firestore client.
    """
    # Uvicorn reload re-imports modules but keeps the SDK app registry
    if not firebase_admin._apps:
        if not os.path.exists(cred_path):
            raise RuntimeError(
                f"Firebase credentials not found at: {cred_path}\n"
                "Set FIREBASE_CREDENTIALS env var to the service account JSON."
            )

        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)
        logger.info("Firebase Admin initialized successfully.")

    return firestore.client()
