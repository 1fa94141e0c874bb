import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from scholarship_portal.core.errors import PersistenceError
from scholarship_portal.database.models.application_model import ScholarshipApplication
from scholarship_portal.schemas.application_schema import Application
from scholarship_portal.utils.application_utils import convert_to_document, convert_from_document

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"status", "bank_details", "reviewed_by"}


class ApplicationRepository(ABC):
    """Persistence boundary for applications."""

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Write a new application. Raises PersistenceError on any failure."""

    @abstractmethod
    async def find_one(self, tracking_id: str) -> Optional[Application]:
        ...

    @abstractmethod
    async def update(self, tracking_id: str, fields: Dict[str, Any]) -> Optional[Application]:
        """Apply ``fields`` and return the updated record, or None if absent."""

    @abstractmethod
    async def find_all(self) -> List[Application]:
        """All applications, newest first."""


class BeanieApplicationRepository(ApplicationRepository):

    async def create(self, application: Application) -> Application:
        try:
            document = convert_to_document(application)
            await document.insert()
            logger.info(f"Application {application.tracking_id} stored with id {document.id}")
            return application
        except DuplicateKeyError as e:
            logger.error(f"Tracking ID collision for {application.tracking_id}: {e}")
            raise PersistenceError("Tracking ID already exists") from e
        except Exception as e:
            logger.error(f"Failed to store application {application.tracking_id}: {e}")
            raise PersistenceError(f"Could not save application: {e}") from e

    async def find_one(self, tracking_id: str) -> Optional[Application]:
        document = await ScholarshipApplication.find_one(ScholarshipApplication.tracking_id == tracking_id)
        if not document:
            return None
        return convert_from_document(document)

    async def update(self, tracking_id: str, fields: Dict[str, Any]) -> Optional[Application]:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        document = await ScholarshipApplication.find_one(ScholarshipApplication.tracking_id == tracking_id)
        if not document:
            return None

        for key, value in fields.items():
            setattr(document, key, value)
        document.updated_at = datetime.utcnow()

        try:
            await document.save()
        except Exception as e:
            logger.error(f"Failed to update application {tracking_id}: {e}")
            raise PersistenceError(f"Could not update application: {e}") from e

        return convert_from_document(document)

    async def find_all(self) -> List[Application]:
        documents = await ScholarshipApplication.find_all().sort("-created_at").to_list()
        return [convert_from_document(doc) for doc in documents]
