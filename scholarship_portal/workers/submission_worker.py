import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from scholarship_portal.core.config import Settings
from scholarship_portal.core.errors import PersistenceError, PortalError, ValidationError
from scholarship_portal.database.application_repository import ApplicationRepository
from scholarship_portal.helpers.email_builder import (
    build_applicant_email_html,
    build_operations_email_html
)
from scholarship_portal.schemas.application_schema import (
    Application,
    ApplicantDetails,
    ApplicationStatusEnum,
    IncomingFile
)
from scholarship_portal.services.document_renderer import DocumentRenderer
from scholarship_portal.services.notification_service import (
    EmailAttachment,
    Notification,
    NotificationOutcome,
    NotificationService
)
from scholarship_portal.services.sanitizer import sanitize_form
from scholarship_portal.services.storage_service import BlobStorage
from scholarship_portal.services.tracking_id import generate_tracking_id
from scholarship_portal.workers.document_handler import collect_uploaded_documents

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    received = "Received"
    sanitized = "Sanitized"
    persisted = "Persisted"
    rendered = "Rendered"
    notified = "Notified"
    responded = "Responded"
    failed = "Failed"


class SubmissionContext:
    """Everything one submission produces on its way through the pipeline."""

    def __init__(self):
        self.state = SubmissionState.received
        self.application: Optional[Application] = None
        self.artifact: Optional[bytes] = None
        self.notification_outcomes: List[NotificationOutcome] = []
        self.best_effort_failures: Dict[str, str] = {}

    @property
    def tracking_id(self) -> Optional[str]:
        return self.application.tracking_id if self.application else None

    def advance(self, state: SubmissionState):
        logger.info(f"Submission {self.tracking_id or '<new>'}: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, reason: str):
        # Only reachable before the record is written
        logger.error(f"Submission failed in state {self.state.value}: {reason}")
        self.state = SubmissionState.failed


PostCommitHook = Tuple[str, SubmissionState, Callable[[SubmissionContext], Awaitable[None]]]


class SubmissionWorker:
    """
    Orchestrates an application submission.

    Sanitizing and persisting are fatal steps: any error there fails the
    request and nothing is stored. Once the record is written, the remaining
    work runs as post-commit hooks, each inside its own failure boundary, so a
    broken document or email never undoes or hides a stored application.
    """

    def __init__(
        self,
        settings: Settings,
        repository: ApplicationRepository,
        storage: BlobStorage,
        renderer: DocumentRenderer,
        notifier: NotificationService
    ):
        self.settings = settings
        self.repository = repository
        self.storage = storage
        self.renderer = renderer
        self.notifier = notifier
        self.post_commit_hooks: List[PostCommitHook] = [
            ("render_document", SubmissionState.rendered, self._render_document),
            ("send_notifications", SubmissionState.notified, self._send_notifications),
        ]

    async def submit(self, form_fields: Dict[str, str], files: List[IncomingFile]) -> SubmissionContext:
        context = SubmissionContext()

        try:
            details = sanitize_form(form_fields)
            documents, photo_path = await collect_uploaded_documents(files, self.storage)
        except ValidationError as e:
            context.fail(e.message)
            raise
        except Exception as e:
            context.fail(str(e))
            raise PortalError(f"Could not process submission: {str(e)}") from e
        context.advance(SubmissionState.sanitized)

        application = Application(
            tracking_id=generate_tracking_id(),
            applicant_details=ApplicantDetails(entries=details),
            documents=documents,
            photo_path=photo_path,
            status=ApplicationStatusEnum.submitted,
            created_at=datetime.utcnow()
        )

        try:
            await self.repository.create(application)
        except PersistenceError as e:
            context.fail(e.message)
            raise
        except Exception as e:
            context.fail(str(e))
            raise PersistenceError(f"Could not save application: {str(e)}") from e

        context.application = application
        context.advance(SubmissionState.persisted)

        for name, next_state, hook in self.post_commit_hooks:
            await self._run_best_effort(name, hook, context)
            context.advance(next_state)

        context.advance(SubmissionState.responded)
        return context

    async def _run_best_effort(self, name: str, hook, context: SubmissionContext):
        try:
            await hook(context)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.error(f"Best-effort step '{name}' failed for {context.tracking_id}: {reason}", exc_info=True)
            context.best_effort_failures[name] = reason

    async def _render_document(self, context: SubmissionContext):
        application = context.application
        image = None
        if application.photo_path:
            # A photo that was stored but cannot be read fails this step
            image = await self.storage.read(application.photo_path)

        context.artifact = await asyncio.to_thread(
            self.renderer.render,
            application.tracking_id,
            application.applicant_details.entries,
            application.documents,
            image
        )

    def _submitted_on(self) -> str:
        return datetime.now(ZoneInfo(self.settings.TIMEZONE)).strftime("%d/%m/%Y, %I:%M:%S %p")

    def _build_notifications(self, context: SubmissionContext) -> List[Notification]:
        application = context.application
        tracking_id = application.tracking_id
        details = application.applicant_details.entries
        submitted_on = self._submitted_on()
        track_url = f"{self.settings.APP_URL.rstrip('/')}/track/{tracking_id}"

        # Without a rendered document the emails still go out, just unattached
        attachments = []
        if context.artifact:
            attachments.append(EmailAttachment(filename=f"app_{tracking_id}.docx", content=context.artifact))

        notifications = [
            Notification(
                label="applicant",
                to=application.applicant_details.email_id,
                subject=f"{self.settings.PORTAL_NAME} Application - ID: {tracking_id}",
                html=build_applicant_email_html(tracking_id, details, submitted_on, track_url),
                attachments=attachments
            )
        ]

        operations_html = build_operations_email_html(tracking_id, details, application.documents, submitted_on)
        for recipient in self.settings.operations_recipients:
            notifications.append(
                Notification(
                    label="operations",
                    to=recipient,
                    subject=f"New Scholarship Form Received - ID: {tracking_id}",
                    html=operations_html,
                    attachments=attachments
                )
            )
        return notifications

    async def _send_notifications(self, context: SubmissionContext):
        context.notification_outcomes = await self.notifier.dispatch(self._build_notifications(context))
        failed = [o for o in context.notification_outcomes if o.error]
        if failed:
            logger.warning(
                f"{len(failed)} of {len(context.notification_outcomes)} notifications for "
                f"{context.tracking_id} were not delivered"
            )
