"""Application submission, listing and override endpoints.

These are the only write paths of the service: an applicant submits an
application, a credit officer overrides its decision.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from models.loan_application import (
    ApplicantForm,
    ApplicationStatus,
    Decision,
    Document,
    DocumentType,
)
from utils.config import config
from workflows import DocumentCollector

from ..api_utils import get_review_queue, get_workflow
from ..models import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationSummary,
    ErrorResponse,
    OverrideRequest,
)

router = APIRouter(tags=["Applications"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


class ApplicationSubmission(BaseModel):
    """JSON submission with documents already encoded as data URIs."""
    form: dict = Field(..., description="Applicant form fields")
    documents: List[Document] = Field(default_factory=list, description="Documents; later ones replace earlier ones of the same type")


def _read_upload(collector: DocumentCollector, doc_type: DocumentType, upload: Optional[UploadFile]) -> None:
    if upload is None or not upload.filename:
        return
    # One byte past the limit is enough to tell the upload is too large
    data = upload.file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Document {upload.filename!r} exceeds {config.MAX_UPLOAD_BYTES} bytes",
        )
    collector.add_file(doc_type, upload.filename, data, mime_type=upload.content_type or None)


@router.post(
    "/applications",
    response_model=ApplicationResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    operation_id="submit_application",
)
def submit_application(
    full_name: str = Form("", description="Applicant's full name"),
    email: str = Form("", description="Contact email"),
    phone: str = Form("", description="Contact phone number"),
    requested_amount: Optional[float] = Form(None, description="Requested loan amount"),
    id_document: Optional[UploadFile] = File(None, description="Government issued ID (PAN/Aadhaar)"),
    income_proof: Optional[UploadFile] = File(None, description="Salary slip or ITR-V"),
):
    """Submit a loan application with its documents.

    The decision provider is called synchronously; the response carries the
    created application in COMPLETED state.
    """
    collector = DocumentCollector()
    _read_upload(collector, DocumentType.ID, id_document)
    _read_upload(collector, DocumentType.PAYSTUB, income_proof)

    form = {
        "full_name": full_name,
        "email": email,
        "phone": phone,
        "requested_amount": requested_amount,
    }
    application = get_workflow().submit(form, collector)
    return ApplicationResponse.from_application(application)


@router.post(
    "/applications/json",
    response_model=ApplicationResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    operation_id="submit_application_json",
)
def submit_application_json(submission: ApplicationSubmission):
    """Submit a loan application whose documents are data URIs."""
    application = get_workflow().submit(submission.form, submission.documents)
    return ApplicationResponse.from_application(application)


@router.get("/applications", response_model=ApplicationListResponse, operation_id="list_applications")
async def list_applications(
    decision: Optional[Decision] = Query(None, description="Only applications with this decision"),
    status: Optional[ApplicationStatus] = Query(None, description="Only applications in this status"),
):
    """List stored applications, newest first."""
    applications = get_review_queue().applications(decision=decision, status=status)
    return ApplicationListResponse(
        total=len(applications),
        applications=[ApplicationSummary.from_application(app) for app in applications],
    )


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses=ERROR_RESPONSES,
    operation_id="get_application",
)
async def get_application(application_id: str):
    """Get one application with its result and audit trail."""
    application = get_workflow().store.get(application_id)
    return ApplicationResponse.from_application(application)


@router.post(
    "/applications/{application_id}/override",
    response_model=ApplicationResponse,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
    operation_id="override_decision",
)
def override_decision(application_id: str, request: OverrideRequest):
    """Replace the decision of an application with a credit officer's decision."""
    application = get_workflow().override(application_id, request.decision, request.comment)
    return ApplicationResponse.from_application(application)


@router.get("/form-schema", operation_id="get_form_schema")
async def get_form_schema():
    """Describe the applicant form and the document slots."""
    return {
        "form": ApplicantForm.model_json_schema(),
        "documents": [{"doc_type": t.value, "label": t.label} for t in DocumentType],
    }
