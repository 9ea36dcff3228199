"""
intake/services/submission.py

Registration submission workflow:

    RECEIVED -> VALIDATED -> PERSISTED -> NOTIFIED -> COMPLETED

Any failing step moves the submission to ERRORED and stops there. Nothing is
rolled back: a notification failure leaves the written document in place.
Resubmitting an id overwrites the document and notifies again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from intake.core.context import Notifier, UserStore
from intake.core.exceptions import IntakeError, ValidationError
from intake.core.logging import get_logger
from intake.models.user import UserRecord
from intake.services.telegram_notifier import format_registration_message
from intake.services.validator import validate_submission

logger = get_logger(__name__)


class SubmissionStage(str, Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    PERSISTED = "PERSISTED"
    NOTIFIED = "NOTIFIED"
    COMPLETED = "COMPLETED"
    ERRORED = "ERRORED"


@dataclass
class SubmissionResult:
    stage: SubmissionStage
    record_id: Optional[str] = None
    failed_at: Optional[SubmissionStage] = None
    error: Optional[IntakeError] = None

    @property
    def ok(self) -> bool:
        return self.stage == SubmissionStage.COMPLETED

    @property
    def persisted(self) -> bool:
        """True when the document was written, even if a later step failed."""
        return self.ok or self.failed_at == SubmissionStage.NOTIFIED


def process_submission(
    fields: Mapping[str, Any],
    store: UserStore,
    notifier: Notifier,
    channel_id: str,
) -> SubmissionResult:
    """
    Runs one submission through validate -> persist -> notify.

    Returns a SubmissionResult; IntakeErrors are captured on the result
    instead of raised. `failed_at` names the step that was being attempted.
    """
    stage = SubmissionStage.RECEIVED
    record_id = None

    try:
        validate_submission(fields)
        record = UserRecord.from_submission(fields)
        if not record.id:
            raise ValidationError("Missing user id", field="id")
        record_id = record.id
        stage = SubmissionStage.VALIDATED

        store.put(record.id, record.to_document())
        stage = SubmissionStage.PERSISTED
        logger.info("User data persisted", extra={"record_id": record_id, "stage": stage.value})

        notifier.send(channel_id, format_registration_message(record.name, record.email))
        stage = SubmissionStage.NOTIFIED

    except IntakeError as exc:
        failed_at = _next_stage(stage)
        log_extra = {"record_id": record_id, "stage": failed_at.value}
        if stage == SubmissionStage.PERSISTED:
            # Write-then-notify has no compensation step
            logger.warning(
                f"Notification failed after document was written: {exc.message}",
                extra=log_extra,
            )
        else:
            logger.error(f"Error processing form: {exc.message}", extra=log_extra)
        return SubmissionResult(
            stage=SubmissionStage.ERRORED,
            record_id=record_id,
            failed_at=failed_at,
            error=exc,
        )

    logger.info("Submission completed", extra={"record_id": record_id})
    return SubmissionResult(stage=SubmissionStage.COMPLETED, record_id=record_id)


def _next_stage(stage: SubmissionStage) -> SubmissionStage:
    order = [
        SubmissionStage.RECEIVED,
        SubmissionStage.VALIDATED,
        SubmissionStage.PERSISTED,
        SubmissionStage.NOTIFIED,
        SubmissionStage.COMPLETED,
    ]
    return order[order.index(stage) + 1]
