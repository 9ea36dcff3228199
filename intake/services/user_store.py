from __future__ import annotations

from typing import Any, Dict, Mapping

from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from intake.core.exceptions import NotFound, StorageError
from intake.core.logging import get_logger

logger = get_logger(__name__)


class FirestoreUserStore:
    """
    Keyed document access to the users collection:
      {collection}/{user_id}

    put() is an upsert, get() and patch() raise NotFound for missing
    documents. Last writer wins; there is no versioning.
    """

    def __init__(self, db, collection: str = "userdata"):
        self.db = db
        self.collection = collection

    def _doc_ref(self, key: str):
        if not key or not str(key).strip():
            raise StorageError("Document id is required")
        try:
            return self.db.collection(self.collection).document(str(key))
        except ValueError as exc:
            # e.g. an id containing "/" resolves to a collection path
            raise StorageError(f"Invalid document id: {key!r}") from exc

    def put(self, key: str, record: Mapping[str, Any]) -> None:
        ref = self._doc_ref(key)
        payload: Dict[str, Any] = {
            **record,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            ref.set(payload)
        except (gcp_exceptions.GoogleAPIError, ValueError) as exc:
            logger.error("Error writing document %s: %s", key, exc)
            raise StorageError("Error writing user data") from exc

        logger.info("Document successfully written", extra={"record_id": key})

    def get(self, key: str) -> Dict[str, Any]:
        ref = self._doc_ref(key)
        try:
            snapshot = ref.get()
        except gcp_exceptions.GoogleAPIError as exc:
            logger.error("Error fetching document %s: %s", key, exc)
            raise StorageError("Error fetching user data") from exc

        if not snapshot.exists:
            raise NotFound("User not found")
        return snapshot.to_dict() or {}

    def patch(self, key: str, partial: Mapping[str, Any]) -> None:
        ref = self._doc_ref(key)

        # Firestore rejects an empty update; treat it as an existence check
        if not partial:
            self.get(key)
            return

        try:
            ref.update(dict(partial))
        except gcp_exceptions.NotFound as exc:
            raise NotFound("User not found") from exc
        except (gcp_exceptions.GoogleAPIError, ValueError) as exc:
            logger.error("Error updating document %s: %s", key, exc)
            raise StorageError("Error updating user data") from exc

        logger.info("Document updated", extra={"record_id": key})
