from datetime import datetime
from typing import Any, Dict, Optional

from scholarship_portal.schemas.application_schema import Application
from scholarship_portal.services.sanitizer import MISSING_VALUE, humanize_details


def format_submitted_date(created_at: Optional[datetime]) -> str:
    return created_at.strftime("%d-%m-%Y") if created_at else MISSING_VALUE


def build_overview_entry(application: Application) -> Dict[str, Any]:
    details = application.applicant_details
    return {
        "trackingId": application.tracking_id,
        "applicantName": details.applicant_name or "Unknown",
        "status": application.status.value,
        "submittedDate": format_submitted_date(application.created_at),
        "photo": application.photo_path,
        "keyDetails": {
            "applicantType": details.applicant_type or MISSING_VALUE,
            "contactNumber": details.contact_number or MISSING_VALUE,
            "requestCategory": details.request_category or MISSING_VALUE
        }
    }


def build_application_details(application: Application) -> Dict[str, Any]:
    entries = application.applicant_details.entries
    return {
        "trackingId": application.tracking_id,
        "applicantDetails": humanize_details(entries),
        "documents": [doc.model_dump() for doc in application.documents if doc.name and doc.path],
        "photo": application.photo_path,
        "status": application.status.value,
        "submittedDate": format_submitted_date(application.created_at),
        "rawApplicantDetails": dict(entries)
    }


def build_track_response(application: Application) -> Dict[str, Any]:
    return {
        "success": True,
        "trackingId": application.tracking_id,
        "status": application.status.value,
        "details": humanize_details(application.applicant_details.entries),
        "documents": [doc.model_dump() for doc in application.documents]
    }
