from datetime import datetime

import pytest

from scholarship_portal.core.errors import NotFoundError, ValidationError
from scholarship_portal.schemas.application_schema import (
    ApplicantDetails,
    Application,
    ApplicationStatusEnum,
)
from scholarship_portal.services.status_service import StatusService, normalize_status


@pytest.fixture
def stored(repository):
    application = Application(
        tracking_id="APP-0A1B2C3D",
        applicant_details=ApplicantDetails(entries={"applicant_name": "Asha Kumar"}),
        created_at=datetime(2024, 5, 3, 10, 30)
    )
    repository.records[application.tracking_id] = application
    return application


@pytest.mark.parametrize("raw, expected", [
    ("eligible", ApplicationStatusEnum.eligible),
    ("UNDER REVIEW", ApplicationStatusEnum.under_review),
    ("funds transferred", ApplicationStatusEnum.funds_transferred),
    ("Rejected", ApplicationStatusEnum.rejected),
])
def test_normalize_status_accepts_any_case(raw, expected):
    assert normalize_status(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "approved", "under_review"])
def test_normalize_status_rejects_unknown_values(raw):
    with pytest.raises(ValidationError, match="Invalid or missing status"):
        normalize_status(raw)


@pytest.mark.asyncio
async def test_update_status_changes_only_supplied_fields(repository, stored):
    service = StatusService(repository)

    await service.update_status("APP-0A1B2C3D", "eligible", reviewed_by="trustee-1")

    record = repository.records["APP-0A1B2C3D"]
    assert record.status == ApplicationStatusEnum.eligible
    assert record.reviewed_by == "trustee-1"
    assert record.bank_details == {}
    assert record.applicant_details.applicant_name == "Asha Kumar"


@pytest.mark.asyncio
async def test_update_status_records_bank_details(repository, stored):
    service = StatusService(repository)
    bank = {"account": "1234567890", "ifsc": "SBIN0000001"}

    await service.update_status("APP-0A1B2C3D", "Funds Transferred", bank_details=bank)

    record = repository.records["APP-0A1B2C3D"]
    assert record.status == ApplicationStatusEnum.funds_transferred
    assert record.bank_details == bank


@pytest.mark.asyncio
async def test_any_status_may_follow_any_other(repository, stored):
    service = StatusService(repository)

    await service.update_status("APP-0A1B2C3D", "rejected")
    await service.update_status("APP-0A1B2C3D", "submitted")

    assert repository.records["APP-0A1B2C3D"].status == ApplicationStatusEnum.submitted


@pytest.mark.asyncio
async def test_update_status_unknown_application(repository):
    with pytest.raises(NotFoundError, match="Application not found"):
        await StatusService(repository).update_status("APP-FFFFFFFF", "eligible")


@pytest.mark.asyncio
async def test_invalid_status_leaves_record_untouched(repository, stored):
    with pytest.raises(ValidationError):
        await StatusService(repository).update_status("APP-0A1B2C3D", "approved")

    assert repository.records["APP-0A1B2C3D"].status == ApplicationStatusEnum.submitted
