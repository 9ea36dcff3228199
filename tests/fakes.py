"""In-memory fakes for the store and the notifier, no network or Firestore."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from intake.core.exceptions import DeliveryError, NotFound, StorageError


class InMemoryUserStore:
    """Same contract as FirestoreUserStore: upsert, point read, partial update."""

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.fail_with = fail_with
        self.writes = 0

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def put(self, key: str, record: Mapping[str, Any]) -> None:
        self._check()
        self.writes += 1
        self.documents[key] = {**record, "createdAt": datetime.now(timezone.utc)}

    def get(self, key: str) -> Dict[str, Any]:
        self._check()
        if key not in self.documents:
            raise NotFound("User not found")
        return copy.deepcopy(self.documents[key])

    def patch(self, key: str, partial: Mapping[str, Any]) -> None:
        self._check()
        if key not in self.documents:
            raise NotFound("User not found")
        self.documents[key].update(partial)


class FakeNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.sent: List[Tuple[str, str]] = []
        self.fail = fail

    def send(self, channel_id: str, text: str) -> Dict[str, Any]:
        if self.fail:
            raise DeliveryError("Telegram API error: Bad Request: chat not found")
        self.sent.append((channel_id, text))
        return {"message_id": len(self.sent)}


def broken_store() -> InMemoryUserStore:
    return InMemoryUserStore(fail_with=StorageError("Error writing user data"))
