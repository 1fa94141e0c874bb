from fastapi import APIRouter, Depends, Request
from fastapi import status
from starlette.datastructures import UploadFile
from typing import Dict, Any, List
import logging

from scholarship_portal.core.dependencies import (
    get_query_service,
    get_status_service,
    get_submission_worker
)
from scholarship_portal.core.errors import PortalError, ValidationError
from scholarship_portal.schemas.application_schema import (
    IncomingFile,
    StatusUpdateRequest,
    StatusUpdateResponse,
    SubmitResponse
)
from scholarship_portal.services.application_query_service import ApplicationQueryService
from scholarship_portal.services.status_service import StatusService
from scholarship_portal.workers.submission_worker import SubmissionWorker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["Applications"])


# Accepts a multipart application form with its uploaded documents
@router.post("/submit", response_model=SubmitResponse, status_code=status.HTTP_200_OK)
async def submit_application(
    request: Request,
    worker: SubmissionWorker = Depends(get_submission_worker)
):
    try:
        form = await request.form()
    except Exception as e:
        logger.error(f"Could not parse submission form: {e}")
        raise ValidationError("Submission failed: malformed form payload")

    form_fields: Dict[str, str] = {}
    files: List[IncomingFile] = []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            # Browsers send an empty part for file inputs left blank
            if not value.filename:
                continue
            files.append(IncomingFile(
                field_name=key,
                filename=value.filename,
                content_type=value.content_type,
                content=await value.read()
            ))
        else:
            form_fields[key] = value

    try:
        context = await worker.submit(form_fields, files)
    except PortalError as e:
        logger.error(f"Submission error: {e.message}")
        raise type(e)(f"Submission failed: {e.message}") from e

    return SubmitResponse(trackingId=context.tracking_id)


# Overview of all applications, newest first
@router.get("/dashboard", response_model=Dict[str, Any])
async def get_dashboard(service: ApplicationQueryService = Depends(get_query_service)):
    overview = await service.dashboard()
    return {"success": True, "overview": overview}


# Full details of one application for reviewers
@router.get("/application/{tracking_id}", response_model=Dict[str, Any])
async def get_application_details(
    tracking_id: str,
    service: ApplicationQueryService = Depends(get_query_service)
):
    details = await service.detail(tracking_id)
    return {"success": True, "details": details}


# Public status lookup by tracking ID
@router.get("/track/{tracking_id}", response_model=Dict[str, Any])
async def track_application(
    tracking_id: str,
    service: ApplicationQueryService = Depends(get_query_service)
):
    return await service.track(tracking_id)


# Changes the review status and optionally records bank details and reviewer
@router.put("/application/{tracking_id}/status", response_model=StatusUpdateResponse)
async def update_application_status(
    tracking_id: str,
    update: StatusUpdateRequest,
    service: StatusService = Depends(get_status_service)
):
    await service.update_status(
        tracking_id,
        update.status,
        bank_details=update.bank_details,
        reviewed_by=update.reviewed_by
    )
    return StatusUpdateResponse()
