from scholarship_portal.database.models.application_model import (
    ScholarshipApplication,
    StoredDocument
)
from scholarship_portal.schemas.application_schema import (
    Application,
    ApplicantDetails,
    DocumentRef
)


def convert_to_document(application: Application) -> ScholarshipApplication:
    return ScholarshipApplication(
        tracking_id=application.tracking_id,
        applicant_details=dict(application.applicant_details.entries),
        documents=[StoredDocument(**doc.model_dump()) for doc in application.documents],
        photo_path=application.photo_path,
        status=application.status,
        bank_details=application.bank_details,
        reviewed_by=application.reviewed_by,
        created_at=application.created_at,
        updated_at=application.updated_at
    )


def convert_from_document(document: ScholarshipApplication) -> Application:
    return Application(
        tracking_id=document.tracking_id,
        applicant_details=ApplicantDetails(entries=document.applicant_details or {}),
        documents=[DocumentRef(**doc.model_dump()) for doc in document.documents],
        photo_path=document.photo_path,
        status=document.status,
        bank_details=document.bank_details or {},
        reviewed_by=document.reviewed_by,
        created_at=document.created_at,
        updated_at=document.updated_at
    )
