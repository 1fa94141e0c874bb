from pydantic import BaseModel, Field
from enum import Enum
from typing import List, Dict, Any, Optional
from datetime import datetime


class ApplicationStatusEnum(str, Enum):
    submitted = "Submitted"
    under_review = "Under Review"
    eligible = "Eligible"
    rejected = "Rejected"
    funds_transferred = "Funds Transferred"


# Keys the service reads directly; everything else is carried through as-is.
WELL_KNOWN_DETAIL_KEYS = (
    "applicant_name",
    "applicant_type",
    "dob",
    "contact_number",
    "email_id",
    "request_category",
)


class ApplicantDetails(BaseModel):
    """Sanitized applicant fields in submission order.

    The form is open-ended, so the ordered ``entries`` mapping is the source of
    truth; the properties give typed access to the keys the service relies on.
    """

    entries: Dict[str, str] = Field(default_factory=dict, description="Sanitized field name -> value, in form order")

    @property
    def applicant_name(self) -> Optional[str]:
        return self.entries.get("applicant_name") or None

    @property
    def applicant_type(self) -> Optional[str]:
        return self.entries.get("applicant_type") or None

    @property
    def dob(self) -> Optional[str]:
        return self.entries.get("dob") or None

    @property
    def contact_number(self) -> Optional[str]:
        return self.entries.get("contact_number") or None

    @property
    def email_id(self) -> Optional[str]:
        return self.entries.get("email_id") or None

    @property
    def request_category(self) -> Optional[str]:
        return self.entries.get("request_category") or None

    @property
    def extra(self) -> Dict[str, str]:
        return {k: v for k, v in self.entries.items() if k not in WELL_KNOWN_DETAIL_KEYS}


class DocumentRef(BaseModel):
    name: str = Field(..., description="Human readable label derived from the upload field name")
    path: str = Field(..., description="Storage locator of the uploaded file")


class Application(BaseModel):
    tracking_id: str = Field(..., description="Public tracking identifier (APP-XXXXXXXX)")
    applicant_details: ApplicantDetails = Field(default_factory=ApplicantDetails)
    documents: List[DocumentRef] = Field(default_factory=list)
    photo_path: Optional[str] = Field(None, description="Locator of the portrait upload, also listed in documents")
    status: ApplicationStatusEnum = Field(default=ApplicationStatusEnum.submitted)
    bank_details: Dict[str, Any] = Field(default_factory=dict)
    reviewed_by: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class IncomingFile(BaseModel):
    """An uploaded file already read from the multipart request."""

    field_name: str
    filename: str
    content_type: Optional[str] = None
    content: bytes


class StatusUpdateRequest(BaseModel):
    status: str = Field(default="", description="Requested status, any letter case")
    bank_details: Optional[Dict[str, Any]] = Field(None, alias="bankDetails")
    reviewed_by: Optional[str] = Field(None, alias="reviewedBy")

    class Config:
        populate_by_name = True


class SubmitResponse(BaseModel):
    success: bool = True
    trackingId: str
    message: str = "Application submitted successfully"


class StatusUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Status updated successfully"
