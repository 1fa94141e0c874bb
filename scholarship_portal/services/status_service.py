import logging
from typing import Any, Dict, Optional

from scholarship_portal.core.errors import NotFoundError, ValidationError
from scholarship_portal.database.application_repository import ApplicationRepository
from scholarship_portal.schemas.application_schema import Application, ApplicationStatusEnum
from scholarship_portal.services.sanitizer import capitalize_words

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = {s.value: s for s in ApplicationStatusEnum}


# Title-cases a requested status ("under review" -> "Under Review") and checks it is known
def normalize_status(raw_status: Optional[str]) -> ApplicationStatusEnum:
    if not raw_status:
        raise ValidationError("Invalid or missing status")
    normalized = capitalize_words(raw_status.lower())
    if normalized not in ALLOWED_STATUSES:
        logger.info(f"Invalid status value: {raw_status} (normalized: {normalized})")
        raise ValidationError("Invalid or missing status")
    return ALLOWED_STATUSES[normalized]


class StatusService:
    """Applies review decisions to stored applications.

    Any status may follow any other; no transition order is enforced.
    """

    def __init__(self, repository: ApplicationRepository):
        self.repository = repository

    async def update_status(
        self,
        tracking_id: str,
        status: Optional[str],
        bank_details: Optional[Dict[str, Any]] = None,
        reviewed_by: Optional[str] = None
    ) -> Application:
        normalized = normalize_status(status)

        fields: Dict[str, Any] = {"status": normalized}
        if bank_details is not None:
            fields["bank_details"] = bank_details
        if reviewed_by is not None:
            fields["reviewed_by"] = reviewed_by

        application = await self.repository.update(tracking_id, fields)
        if not application:
            logger.info(f"Application not found for {tracking_id}")
            raise NotFoundError("Application not found")

        logger.info(f"Status for {tracking_id} updated to {normalized.value}")
        return application
