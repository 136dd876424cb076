"""Pydantic models for API requests and responses.

This module defines the data models used for API request/response validation.
Document payloads are never echoed back; responses only describe them.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from models.loan_application import (
    ApplicantForm,
    ApplicationStatus,
    AuditEntry,
    Decision,
    DocumentType,
    LoanApplication,
    ProcessingResult,
)
from utils.data_uri import parse_data_uri


class DocumentInfo(BaseModel):
    """Response model describing an attached document."""
    doc_type: DocumentType = Field(..., description="Document type tag")
    name: str = Field(..., description="Original file name")
    mime_type: Optional[str] = Field(None, description="Mime type of the payload")


class ApplicationResponse(BaseModel):
    """Response model for a full loan application."""
    id: str = Field(..., description="Application identifier")
    form: ApplicantForm = Field(..., description="Applicant form data")
    status: ApplicationStatus = Field(..., description="Lifecycle status")
    documents: List[DocumentInfo] = Field(..., description="Attached documents")
    result: Optional[ProcessingResult] = Field(None, description="Current processing result")
    audit_trail: List[AuditEntry] = Field(..., description="Chronological audit trail")

    @classmethod
    def from_application(cls, application: LoanApplication) -> "ApplicationResponse":
        documents = []
        for document in application.document_list:
            data_uri = parse_data_uri(document.content)
            documents.append(DocumentInfo(
                doc_type=document.doc_type,
                name=document.name,
                mime_type=data_uri.mime_type if data_uri else None,
            ))
        return cls(
            id=application.id,
            form=application.form,
            status=application.status,
            documents=documents,
            result=application.result,
            audit_trail=list(application.audit_trail),
        )


class ApplicationSummary(BaseModel):
    """Response model for one row of an application list."""
    id: str = Field(..., description="Application identifier")
    full_name: str = Field(..., description="Applicant name")
    requested_amount: float = Field(..., description="Requested loan amount")
    status: ApplicationStatus = Field(..., description="Lifecycle status")
    decision: Optional[Decision] = Field(None, description="Current decision")
    processed_at: Optional[datetime] = Field(None, description="When the automated decision was received")

    @classmethod
    def from_application(cls, application: LoanApplication) -> "ApplicationSummary":
        return cls(
            id=application.id,
            full_name=application.form.full_name,
            requested_amount=application.form.requested_amount,
            status=application.status,
            decision=application.decision,
            processed_at=application.result.timestamp if application.result else None,
        )


class ApplicationListResponse(BaseModel):
    """Response model for application listings."""
    total: int = Field(..., description="Number of applications returned")
    applications: List[ApplicationSummary] = Field(..., description="Applications, newest first")


class PendingReviewsResponse(BaseModel):
    """Response model for the human review queue."""
    pending_count: int = Field(..., description="Applications awaiting human review")
    applications: List[ApplicationSummary] = Field(..., description="Applications awaiting human review")


class SelectRequest(BaseModel):
    """Request model for selecting an application in the review queue."""
    application_id: Optional[str] = Field(None, description="Application to select; null clears the selection")


class SelectionResponse(BaseModel):
    """Response model for the current review selection."""
    selected_id: Optional[str] = Field(None, description="Selected application id")
    application: Optional[ApplicationResponse] = Field(None, description="Selected application")


class OverrideRequest(BaseModel):
    """Request model for a manual override."""
    decision: str = Field(..., description="One of AUTO_APPROVE, AUTO_REJECT, HUMAN_REVIEW, INCOMPLETE")
    comment: str = Field("", description="Reason for manual override")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    document_name: Optional[str] = Field(None, description="Offending document, for document errors")
