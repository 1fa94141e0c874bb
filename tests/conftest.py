"""
Fixtures shared by the application tests.
"""

import base64
import json
import os
from typing import Any, Dict, List, Optional

import httpx
import pytest

from scholarship_portal.core.config import Settings
from scholarship_portal.core.errors import PersistenceError
from scholarship_portal.database.application_repository import ApplicationRepository, UPDATABLE_FIELDS
from scholarship_portal.schemas.application_schema import Application
from scholarship_portal.services.document_renderer import DocumentRenderer
from scholarship_portal.services.notification_service import NotificationService
from scholarship_portal.services.storage_service import BlobStorage
from scholarship_portal.workers.submission_worker import SubmissionWorker

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PDF_BYTES = b"%PDF-1.4\n%test document\n"

APPLICANT_EMAIL = "asha@example.com"
ADMIN_EMAIL = "admin@example.org"
TRUSTEE_EMAIL = "trustee@example.org"


class InMemoryApplicationRepository(ApplicationRepository):
    def __init__(self):
        self.records: Dict[str, Application] = {}

    async def create(self, application: Application) -> Application:
        if application.tracking_id in self.records:
            raise PersistenceError("Tracking ID already exists")
        self.records[application.tracking_id] = application.model_copy(deep=True)
        return application

    async def find_one(self, tracking_id: str) -> Optional[Application]:
        record = self.records.get(tracking_id)
        return record.model_copy(deep=True) if record else None

    async def update(self, tracking_id: str, fields: Dict[str, Any]) -> Optional[Application]:
        assert set(fields) <= UPDATABLE_FIELDS
        record = self.records.get(tracking_id)
        if not record:
            return None
        self.records[tracking_id] = record.model_copy(update=fields)
        return self.records[tracking_id].model_copy(deep=True)

    async def find_all(self) -> List[Application]:
        return sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)


class InMemoryBlobStorage(BlobStorage):
    def __init__(self):
        self.blobs: Dict[str, bytes] = {}

    async def save(self, field_name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        ext = os.path.splitext(filename)[1]
        locator = f"uploads/{field_name}-{len(self.blobs) + 1}{ext}"
        self.blobs[locator] = content
        return locator

    async def read(self, locator: str) -> bytes:
        return self.blobs[locator]


class BrevoStub:
    """Stands in for the Brevo API; records every request it receives."""

    def __init__(self, failing_recipients=()):
        self.failing_recipients = set(failing_recipients)
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append({"headers": dict(request.headers), "payload": payload})
        recipient = payload["to"][0]["email"]
        if recipient in self.failing_recipients:
            return httpx.Response(400, json={"code": "invalid_parameter", "message": "email is not valid"})
        return httpx.Response(201, json={"messageId": f"<{recipient}@smtp-relay>"})

    @property
    def recipients(self) -> List[str]:
        return [r["payload"]["to"][0]["email"] for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def test_settings():
    return Settings(
        PORTAL_NAME="AUYPCT",
        APP_URL="https://portal.example.org",
        BREVO_API_KEY="xkeysib-test-key-123456",
        BREVO_API_URL="https://api.brevo.test/v3/smtp/email",
        EMAIL_FROM="noreply@example.org",
        ADMIN_EMAILS=ADMIN_EMAIL,
        TRUSTEE_EMAILS=TRUSTEE_EMAIL,
        TIMEZONE="Asia/Kolkata"
    )


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES


@pytest.fixture
def repository():
    return InMemoryApplicationRepository()


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def brevo():
    return BrevoStub()


@pytest.fixture
def notifier(test_settings, brevo):
    return NotificationService(test_settings, transport=brevo.transport())


@pytest.fixture
def worker(test_settings, repository, storage, notifier):
    return SubmissionWorker(
        settings=test_settings,
        repository=repository,
        storage=storage,
        renderer=DocumentRenderer(test_settings.PORTAL_NAME),
        notifier=notifier
    )


@pytest.fixture
def form_fields():
    return {
        "applicant_name": "<b>Asha</b> Kumar",
        "applicant_type": "Educational",
        "dob": "1990-05-03",
        "contact_number": "9876543210",
        "email_id": APPLICANT_EMAIL,
        "request_category": "Tuition",
        "scholarship_justification": "Needs support <script>alert(1)</script>",
        "referral": "",
        "captcha-answer": "42",
    }
