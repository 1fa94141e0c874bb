import logging
from typing import Any, Dict, List

from scholarship_portal.core.errors import NotFoundError, ValidationError
from scholarship_portal.database.application_repository import ApplicationRepository
from scholarship_portal.helpers.response_builder import (
    build_application_details,
    build_overview_entry,
    build_track_response
)
from scholarship_portal.services.tracking_id import is_valid_tracking_id

logger = logging.getLogger(__name__)


class ApplicationQueryService:
    """Read-only projections for the dashboard, reviewers and public tracking."""

    def __init__(self, repository: ApplicationRepository):
        self.repository = repository

    async def dashboard(self) -> List[Dict[str, Any]]:
        applications = await self.repository.find_all()
        logger.info(f"Fetched applications count: {len(applications)}")
        return [build_overview_entry(app) for app in applications]

    async def detail(self, tracking_id: str) -> Dict[str, Any]:
        if not is_valid_tracking_id(tracking_id):
            logger.info(f"Invalid trackingId format: {tracking_id}")
            raise ValidationError("Invalid tracking ID format")

        application = await self.repository.find_one(tracking_id)
        if not application:
            logger.info(f"Application not found for trackingId: {tracking_id}")
            raise NotFoundError("Application not found")
        return build_application_details(application)

    async def track(self, tracking_id: str) -> Dict[str, Any]:
        application = await self.repository.find_one(tracking_id)
        if not application:
            logger.info(f"Application not found for trackingId: {tracking_id}")
            raise NotFoundError("Application not found")
        return build_track_response(application)
