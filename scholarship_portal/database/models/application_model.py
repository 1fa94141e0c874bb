from beanie import Document, Indexed
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from scholarship_portal.schemas.application_schema import ApplicationStatusEnum


class StoredDocument(BaseModel):
    name: str = Field(..., description="Human readable document label")
    path: str = Field(..., description="Storage locator of the uploaded file")


class ScholarshipApplication(Document):
    tracking_id: Indexed(str, unique=True) = Field(..., description="Public tracking identifier of the application")
    applicant_details: Dict[str, str] = Field(default_factory=dict, description="Sanitized applicant form fields in submission order")
    documents: List[StoredDocument] = Field(default_factory=list, description="Uploaded documents")
    photo_path: Optional[str] = Field(None, description="Storage locator of the passport photo")
    status: ApplicationStatusEnum = Field(default=ApplicationStatusEnum.submitted, description="Current review status")
    bank_details: Dict[str, Any] = Field(default_factory=dict, description="Bank details captured during review")
    reviewed_by: Optional[str] = Field(None, description="Reviewer who last changed the status")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="When the application was submitted")
    updated_at: Optional[datetime] = Field(None, description="When the status was last changed")

    class Settings:
        name = "applications"

    class Config:
        populate_by_name = True
        json_encoders = {datetime: lambda v: v.isoformat()}
