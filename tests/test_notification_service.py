import base64

import httpx
import pytest

from scholarship_portal.core.config import Settings
from scholarship_portal.core.errors import NotificationError
from scholarship_portal.services.notification_service import (
    EmailAttachment,
    Notification,
    NotificationService,
)


@pytest.mark.asyncio
async def test_send_email_posts_brevo_payload(notifier, brevo):
    message_id = await notifier.send_email(
        "asha@example.com",
        "AUYPCT Application - ID: APP-0A1B2C3D",
        "<p>hello</p>",
        [EmailAttachment(filename="app_APP-0A1B2C3D.docx", content=b"docx-bytes")]
    )

    assert message_id == "<asha@example.com@smtp-relay>"
    request = brevo.requests[0]
    assert request["headers"]["api-key"] == "xkeysib-test-key-123456"
    payload = request["payload"]
    assert payload["sender"] == {"email": "noreply@example.org", "name": "AUYPCT Portal"}
    assert payload["subject"] == "AUYPCT Application - ID: APP-0A1B2C3D"
    assert payload["htmlContent"] == "<p>hello</p>"
    assert payload["attachment"] == [
        {"name": "app_APP-0A1B2C3D.docx", "content": base64.b64encode(b"docx-bytes").decode()}
    ]


@pytest.mark.asyncio
async def test_send_email_without_attachments_omits_attachment_key(notifier, brevo):
    await notifier.send_email("asha@example.com", "subject", "<p>hi</p>")

    assert "attachment" not in brevo.requests[0]["payload"]


@pytest.mark.asyncio
async def test_send_email_without_api_key_is_skipped(brevo):
    service = NotificationService(Settings(BREVO_API_KEY=None), transport=brevo.transport())

    assert await service.send_email("asha@example.com", "subject", "<p>hi</p>") is None
    assert brevo.requests == []


@pytest.mark.asyncio
async def test_send_email_raises_on_api_error(notifier, brevo):
    brevo.failing_recipients.add("bad@example.com")

    with pytest.raises(NotificationError, match="email is not valid"):
        await notifier.send_email("bad@example.com", "subject", "<p>hi</p>")


@pytest.mark.asyncio
async def test_send_email_raises_on_transport_error(test_settings):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = NotificationService(test_settings, transport=httpx.MockTransport(refuse))

    with pytest.raises(NotificationError, match="Failed to reach Brevo"):
        await service.send_email("asha@example.com", "subject", "<p>hi</p>")


@pytest.mark.asyncio
async def test_dispatch_isolates_each_recipient(notifier, brevo):
    brevo.failing_recipients.add("asha@example.com")
    notifications = [
        Notification(label="applicant", to="asha@example.com", subject="s", html="<p>a</p>"),
        Notification(label="operations", to="admin@example.org", subject="s", html="<p>b</p>"),
        Notification(label="operations", to=None, subject="s", html="<p>c</p>"),
    ]

    outcomes = await notifier.dispatch(notifications)

    assert sorted(brevo.recipients) == ["admin@example.org", "asha@example.com"]
    applicant, admin, missing = outcomes
    assert not applicant.sent and "email is not valid" in applicant.error
    assert admin.sent and admin.message_id == "<admin@example.org@smtp-relay>"
    assert not missing.sent and missing.error == "missing recipient"
