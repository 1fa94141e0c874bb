import logging
from typing import Dict, List, Optional, Tuple

from scholarship_portal.core.errors import ValidationError
from scholarship_portal.schemas.application_schema import DocumentRef, IncomingFile
from scholarship_portal.services.sanitizer import humanize_key
from scholarship_portal.services.storage_service import BlobStorage

logger = logging.getLogger(__name__)

PORTRAIT_FIELD = "passport_photo"
ALLOWED_TYPES = {"image/jpeg", "image/png", "application/pdf"}
MAX_SIZE = 5 * 1024 * 1024

# Accepted upload fields and how many files each may carry
UPLOAD_FIELDS: Dict[str, int] = {
    "passport_photo": 1,
    "educational_aadhaar": 1,
    "educational_passbook": 1,
    "educational_marksheet": 1,
    "educational_fee_receipt": 1,
    "educational_school_id": 1,
    "women_aadhaar": 1,
    "women_passbook": 1,
    "women_business_docs": 10,
    "entrepreneur_aadhaar": 1,
    "entrepreneur_passbook": 1,
    "entrepreneur_business_docs": 10,
    "medical_aadhaar": 1,
    "medical_passbook": 1,
    "medical_letter": 1,
    "medical_receipt": 1,
}


def _group_by_field(files: List[IncomingFile]) -> Dict[str, List[IncomingFile]]:
    grouped: Dict[str, List[IncomingFile]] = {}
    for file in files:
        grouped.setdefault(file.field_name, []).append(file)
    return grouped


# Rejects unknown fields, too many files per field, disallowed types and oversized files
def validate_uploads(files: List[IncomingFile]) -> Dict[str, List[IncomingFile]]:
    grouped = _group_by_field(files)
    for field, field_files in grouped.items():
        max_count = UPLOAD_FIELDS.get(field)
        if max_count is None:
            logger.warning(f"Rejected upload for unexpected field: {field}")
            raise ValidationError(f"Unexpected file field: {field}")
        if len(field_files) > max_count:
            logger.warning(f"Rejected {len(field_files)} files for {field} (max {max_count})")
            raise ValidationError(f"Too many files for {field} (max {max_count})")

        for file in field_files:
            if file.content_type not in ALLOWED_TYPES:
                logger.warning(f"Rejected {file.filename} for {field}: content type {file.content_type}")
                raise ValidationError("Invalid file type. Only JPEG, PNG, and PDF are allowed.")
            if len(file.content) > MAX_SIZE:
                logger.warning(f"Rejected {file.filename} for {field}: {len(file.content)} bytes")
                raise ValidationError(f"File {file.filename} exceeds 5MB limit")
    return grouped


async def collect_uploaded_documents(
    files: List[IncomingFile],
    storage: BlobStorage
) -> Tuple[List[DocumentRef], Optional[str]]:
    """
    Validates and stores every upload.

    Returns the document list (one entry per file, labelled from its field
    name) and the locator of the portrait, which also appears in the list.
    """
    grouped = validate_uploads(files)

    documents: List[DocumentRef] = []
    photo_path: Optional[str] = None

    for field, field_files in grouped.items():
        for file in field_files:
            locator = await storage.save(field, file.filename, file.content, file.content_type)
            documents.append(DocumentRef(name=humanize_key(field), path=locator))
            if field == PORTRAIT_FIELD and photo_path is None:
                photo_path = locator

    logger.info(f"Stored {len(documents)} uploaded documents (portrait: {'yes' if photo_path else 'no'})")
    return documents, photo_path
