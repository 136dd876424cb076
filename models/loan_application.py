"""Data models for loan application intake and review.

This module defines the Pydantic models for a loan application as it moves
through intake, automated decisioning and manual review. All models are
frozen: a processing result or audit entry is a snapshot that is replaced,
never edited in place.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Classes:
    Decision: Categorical outcome of a decision (automated or manual).
    ApplicationStatus: Lifecycle state of a loan application.
    DocumentType: Kind of supporting document attached to an application.
    ApplicantForm: Data typed in by the applicant.
    Document: A single uploaded document carried as a data URI.
    ExtractedFields: Fields the decision provider read from the documents.
    ValidationStatus: Result of checking one extracted field.
    ProviderOutput: Structured answer of a decision provider.
    ProcessingResult: Provider output stamped with the time it was received.
    AuditEntry: One line of the append-only audit trail.
    LoanApplication: Aggregate root stored in the application store.

Example:
    Creating an applicant form::

        from models.loan_application import ApplicantForm

        form = ApplicantForm(
            full_name="A. Kumar",
            email="a.kumar@example.com",
            phone="+91 98450 00000",
            requested_amount=50000,
        )
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Decision(str, Enum):
    """Categorical loan decision. Values carry no ordering."""

    AUTO_APPROVE = "AUTO_APPROVE"
    AUTO_REJECT = "AUTO_REJECT"
    HUMAN_REVIEW = "HUMAN_REVIEW"
    INCOMPLETE = "INCOMPLETE"

    @classmethod
    def parse(cls, value) -> "Decision":
        """Map a free-form decision string onto one of the known values.

        Accepts the enum itself, or a string that matches a value once
        whitespace is trimmed, case is folded and spaces/hyphens become
        underscores (``"human review"`` -> ``HUMAN_REVIEW``).

        Raises:
            ValueError: If the value is not one of the four decisions.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Decision must be a string, got {type(value).__name__}")
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(d.value for d in cls)
            raise ValueError(f"Unrecognized decision {value!r}; expected one of: {allowed}") from None


class ApplicationStatus(str, Enum):
    """Lifecycle state of a loan application."""

    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    OVERRIDDEN = "OVERRIDDEN"


# States in which an application carries a processing result
RESULT_STATES = frozenset({ApplicationStatus.COMPLETED, ApplicationStatus.OVERRIDDEN})


class DocumentType(str, Enum):
    """Kind of supporting document. Declaration order is the upload order."""

    ID = "ID"
    PAYSTUB = "PAYSTUB"

    @property
    def label(self) -> str:
        return _DOCUMENT_LABELS[self]


_DOCUMENT_LABELS = {
    DocumentType.ID: "Government Issued ID (PAN/Aadhaar)",
    DocumentType.PAYSTUB: "Salary Slip / ITR-V",
}


class AuditAction(str, Enum):
    APPLICATION_PROCESSED = "APPLICATION_PROCESSED"
    MANUAL_OVERRIDE = "MANUAL_OVERRIDE"


class AuditActor(str, Enum):
    AI_SYSTEM = "AI_SYSTEM"
    CREDIT_OFFICER = "CREDIT_OFFICER"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ApplicantForm(BaseModel):
    """Personal details entered by the applicant.

    Attributes:
        full_name (str): Applicant's full name. Must not be blank.
        email (str): Contact email. Must not be blank.
        phone (str): Contact phone number. May be empty.
        requested_amount (float): Requested loan amount, strictly positive and finite.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, description="Applicant's full name")
    email: str = Field(..., min_length=1, description="Contact email address")
    phone: str = Field(default="", description="Contact phone number")
    requested_amount: float = Field(..., gt=0, allow_inf_nan=False, description="Requested loan amount")


class Document(BaseModel):
    """A supporting document attached to an application.

    The payload is kept as a data URI (``data:<mime>;base64,<data>``). Its
    shape is checked when the application is submitted so that a bad upload
    is reported against the document name.
    """

    model_config = ConfigDict(frozen=True)

    doc_type: DocumentType = Field(..., description="Document type tag")
    name: str = Field(..., min_length=1, description="Original file name")
    content: str = Field(..., description="Payload encoded as a data URI")


class _ProviderModel(BaseModel):
    # Decision providers answer in camelCase JSON; snake_case is accepted too
    model_config = ConfigDict(
        frozen=True,
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
    )


class ExtractedFields(_ProviderModel):
    """Fields read from the documents. ``None`` marks a missing value."""

    full_name: Optional[str] = None
    dob: Optional[str] = None
    age: Optional[float] = None
    identity_number: Optional[str] = None
    employer_name: Optional[str] = None
    annual_income: Optional[float] = None

    def missing_fields(self) -> List[str]:
        """Return the names of fields the provider could not extract."""
        return [name for name, value in self if value is None]


class ValidationStatus(_ProviderModel):
    """Outcome of validating one extracted field."""

    field_name: str
    is_valid: bool
    message: str = ""


class ProviderOutput(_ProviderModel):
    """Structured answer returned by a decision provider.

    The ``decision`` field is validated against the four known decisions; an
    unknown value makes the whole output invalid.
    """

    extracted_fields: ExtractedFields = Field(default_factory=ExtractedFields)
    validations: Tuple[ValidationStatus, ...] = ()
    decision: Decision
    explanation: str
    missing_data: Tuple[str, ...] = ()
    user_feedback: str = ""

    @field_validator("decision", mode="before")
    @classmethod
    def _parse_decision(cls, value):
        return Decision.parse(value)

    @field_validator("validations", "missing_data", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return () if value is None else value


class ProcessingResult(ProviderOutput):
    """Immutable snapshot of a decision, stamped when it was received.

    Attributes:
        timestamp (datetime): Time the provider result was received. Set by
            the caller, not by the provider.
    """

    timestamp: datetime

    @classmethod
    def from_output(cls, output: ProviderOutput, timestamp: datetime) -> "ProcessingResult":
        return cls(**{**dict(output), "timestamp": timestamp})


class AuditEntry(BaseModel):
    """One entry of an application's append-only audit trail."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    action: AuditAction
    actor: AuditActor
    comment: Optional[str] = None


class LoanApplication(BaseModel):
    """Aggregate root for a loan application.

    Attributes:
        id (str): Identifier assigned at submission. Never changes.
        form (ApplicantForm): Applicant's form data.
        status (ApplicationStatus): Current lifecycle state.
        documents (Dict[DocumentType, Document]): At most one document per type.
        result (Optional[ProcessingResult]): Present iff the status is
            COMPLETED or OVERRIDDEN.
        audit_trail (Tuple[AuditEntry, ...]): Chronological, append-only log.

    Example:
        >>> app.decision
        <Decision.HUMAN_REVIEW: 'HUMAN_REVIEW'>
        >>> [entry.action for entry in app.audit_trail]
        [<AuditAction.APPLICATION_PROCESSED: 'APPLICATION_PROCESSED'>]
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Application identifier")
    form: ApplicantForm
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    documents: Dict[DocumentType, Document] = Field(default_factory=dict)
    result: Optional[ProcessingResult] = None
    audit_trail: Tuple[AuditEntry, ...] = ()

    @model_validator(mode="after")
    def _check_invariants(self) -> "LoanApplication":
        has_result_state = self.status in RESULT_STATES
        if has_result_state and self.result is None:
            raise ValueError(f"Application in status {self.status.value} must carry a result")
        if not has_result_state and self.result is not None:
            raise ValueError(f"Application in status {self.status.value} cannot carry a result")
        if has_result_state and not self.audit_trail:
            raise ValueError(f"Application in status {self.status.value} must have an audit trail")
        for doc_type, document in self.documents.items():
            if document.doc_type != doc_type:
                raise ValueError(
                    f"Document {document.name!r} is filed under {doc_type.value} "
                    f"but tagged {document.doc_type.value}"
                )
        return self

    @property
    def decision(self) -> Optional[Decision]:
        """Current decision, or None while no result is available."""
        return self.result.decision if self.result else None

    @property
    def document_list(self) -> List[Document]:
        """Documents ordered by document type declaration."""
        return [self.documents[t] for t in DocumentType if t in self.documents]

    def evolve(self, **changes) -> "LoanApplication":
        """Return a validated copy with ``changes`` applied.

        Unlike ``model_copy(update=...)`` the copy goes through validation,
        so a change that breaks an invariant raises instead of slipping in.
        """
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("Application id cannot change")
        return type(self).model_validate({**dict(self), **changes})
