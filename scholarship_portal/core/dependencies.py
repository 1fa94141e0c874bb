from functools import lru_cache
from fastapi import Depends

from scholarship_portal.core.config import settings
from scholarship_portal.database.application_repository import (
    ApplicationRepository,
    BeanieApplicationRepository
)
from scholarship_portal.services.application_query_service import ApplicationQueryService
from scholarship_portal.services.document_renderer import DocumentRenderer
from scholarship_portal.services.notification_service import NotificationService
from scholarship_portal.services.status_service import StatusService
from scholarship_portal.services.storage_service import BlobStorage, build_blob_storage
from scholarship_portal.workers.submission_worker import SubmissionWorker


# Collaborators are built on first use so importing the app never touches Mongo, disk or Brevo
@lru_cache
def get_application_repository() -> ApplicationRepository:
    return BeanieApplicationRepository()


@lru_cache
def get_blob_storage() -> BlobStorage:
    return build_blob_storage(settings)


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService(settings)


def get_submission_worker(
    repository: ApplicationRepository = Depends(get_application_repository),
    storage: BlobStorage = Depends(get_blob_storage),
    notifier: NotificationService = Depends(get_notification_service)
) -> SubmissionWorker:
    return SubmissionWorker(
        settings=settings,
        repository=repository,
        storage=storage,
        renderer=DocumentRenderer(settings.PORTAL_NAME),
        notifier=notifier
    )


def get_status_service(repository: ApplicationRepository = Depends(get_application_repository)) -> StatusService:
    return StatusService(repository)


def get_query_service(repository: ApplicationRepository = Depends(get_application_repository)) -> ApplicationQueryService:
    return ApplicationQueryService(repository)
