"""Loan application lifecycle: submission, automated decision and override.

The lifecycle of an application is::

    SUBMITTED -> PROCESSING -> COMPLETED -> OVERRIDDEN (-> OVERRIDDEN ...)

A record only reaches the store once the decision provider has answered, so
a failed provider call leaves no trace. The transitions themselves are pure
functions returning new records; ``ApplicationWorkflow`` wires them to the
decision provider, the id generator and the store.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    >>> workflow = ApplicationWorkflow(provider=DecisionAgent())
    >>> app = workflow.submit(form, collector)
    >>> app = workflow.override(app.id, Decision.AUTO_APPROVE, "verified manually")
    >>> app.result.explanation
    'OVERRIDDEN BY OFFICER: verified manually'
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, ValidationError

from models.loan_application import (
    RESULT_STATES,
    ApplicantForm,
    ApplicationStatus,
    AuditAction,
    AuditActor,
    AuditEntry,
    Decision,
    Document,
    DocumentType,
    LoanApplication,
    ProcessingResult,
    ProviderOutput,
    utc_now,
)
from utils.data_uri import is_supported_mime_type, parse_data_uri
from utils.id_generator import IdGenerator, short_id

from .application_store import ApplicationStore
from .document_collector import DocumentCollector
from .errors import (
    ApplicationValidationError,
    DuplicateApplicationError,
    InvalidTransitionError,
    ProviderError,
)

logger = logging.getLogger(__name__)

OVERRIDE_EXPLANATION_PREFIX = "OVERRIDDEN BY OFFICER: "

# Attempts at drawing an id that is not already in the store
MAX_ID_ATTEMPTS = 5

# Every application carries an identity document and an income proof
REQUIRED_DOCUMENTS = tuple(DocumentType)

DocumentsInput = Union[DocumentCollector, Mapping, Iterable[Any], None]


class DecisionProvider(Protocol):
    """Capability that extracts applicant data and proposes a decision."""

    def process_application(
        self,
        form: ApplicantForm,
        documents: Sequence[Document],
    ) -> ProviderOutput:
        ...


def override_explanation(comment: str) -> str:
    return f"{OVERRIDE_EXPLANATION_PREFIX}{comment}"


def process_application(
    candidate: LoanApplication,
    output: ProviderOutput,
    received_at: datetime,
) -> LoanApplication:
    """Complete a PROCESSING application with the provider's output.

    Returns:
        New record in COMPLETED state whose audit trail gains one
        APPLICATION_PROCESSED entry carrying the provider's explanation.

    Raises:
        InvalidTransitionError: If the candidate is not PROCESSING.
    """
    if candidate.status != ApplicationStatus.PROCESSING:
        raise InvalidTransitionError(
            f"Application {candidate.id} cannot be completed from status {candidate.status.value}"
        )
    result = ProcessingResult.from_output(output, received_at)
    entry = AuditEntry(
        timestamp=received_at,
        action=AuditAction.APPLICATION_PROCESSED,
        actor=AuditActor.AI_SYSTEM,
        comment=result.explanation,
    )
    return candidate.evolve(
        status=ApplicationStatus.COMPLETED,
        result=result,
        audit_trail=candidate.audit_trail + (entry,),
    )


def apply_override(
    application: LoanApplication,
    decision: Decision,
    comment: str,
    overridden_at: datetime,
) -> LoanApplication:
    """Replace the decision of a resulted application with a manual one.

    Only ``decision`` and ``explanation`` of the result change; extracted
    fields, validations, missing data, feedback and timestamp are carried over
    from the automated result. Overriding an OVERRIDDEN record is allowed and
    appends another audit entry.

    Raises:
        InvalidTransitionError: If the application has no result yet.
    """
    if application.status not in RESULT_STATES or application.result is None:
        raise InvalidTransitionError(
            f"Application {application.id} has no decision to override (status {application.status.value})"
        )
    result = ProcessingResult(
        **{
            **dict(application.result),
            "decision": decision,
            "explanation": override_explanation(comment),
        }
    )
    entry = AuditEntry(
        timestamp=overridden_at,
        action=AuditAction.MANUAL_OVERRIDE,
        actor=AuditActor.CREDIT_OFFICER,
        comment=comment,
    )
    return application.evolve(
        status=ApplicationStatus.OVERRIDDEN,
        result=result,
        audit_trail=application.audit_trail + (entry,),
    )


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        problems.append(f"{location}: {item.get('msg')}")
    return "; ".join(problems)


class ApplicationWorkflow:
    """State machine for loan applications.

    Args:
        provider: Decision provider called once per submission.
        store: Store receiving created applications. A new empty store is
            created when omitted.
        id_generator: Callable returning a fresh application id.
        clock: Callable returning the current (timezone-aware) time.
    """

    def __init__(
        self,
        provider: DecisionProvider,
        store: Optional[ApplicationStore] = None,
        id_generator: IdGenerator = short_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.provider = provider
        self.store = store if store is not None else ApplicationStore()
        self._id_generator = id_generator
        self._clock = clock

    def submit(self, form: Union[ApplicantForm, Mapping], documents: DocumentsInput = None) -> LoanApplication:
        """Submit an application and record the provider's decision.

        Args:
            form: Applicant form, or a mapping with the form fields.
            documents: A DocumentCollector, a mapping of type to Document,
                or an iterable of Documents (a later document of a type
                replaces an earlier one).

        Returns:
            The stored application, in COMPLETED state.

        Raises:
            ApplicationValidationError: Missing form fields, a missing ID or
                income proof, a document that is not an image or PDF, or a document
                payload that is not a base64 data URI. The provider is not
                called.
            ProviderError: The provider failed or returned an invalid result.
                Nothing is stored.
        """
        applicant = self._coerce_form(form)
        collector = self._collect_documents(documents)
        self._check_documents(collector)

        candidate = LoanApplication(
            id=self._new_id(),
            form=applicant,
            status=ApplicationStatus.SUBMITTED,
            documents=collector.as_mapping(),
        )
        logger.info(
            f"Application {candidate.id} submitted for {applicant.full_name} "
            f"with {len(collector)} document(s)"
        )

        candidate = candidate.evolve(status=ApplicationStatus.PROCESSING)
        output = self._call_provider(candidate)
        application = process_application(candidate, output, self._clock())

        application = self._insert(application)
        logger.info(f"Application {application.id} processed: decision={application.decision.value}")
        return application

    def override(
        self,
        application_id: str,
        new_decision: Union[Decision, str],
        comment: str = "",
    ) -> LoanApplication:
        """Apply a credit officer's decision to a stored application.

        Raises:
            ApplicationValidationError: If ``new_decision`` is not a known decision.
            ApplicationNotFoundError: If the store has no such application.
            InvalidTransitionError: If the application has no result.
        """
        try:
            decision = Decision.parse(new_decision)
        except ValueError as e:
            raise ApplicationValidationError(str(e)) from e

        comment = comment or ""
        overridden_at = self._clock()
        application = self.store.update(
            application_id,
            lambda current: apply_override(current, decision, comment, overridden_at),
        )
        logger.info(
            f"Application {application_id} overridden to {decision.value} "
            f"(audit entries: {len(application.audit_trail)})"
        )
        return application

    def _coerce_form(self, form: Union[ApplicantForm, Mapping]) -> ApplicantForm:
        if isinstance(form, ApplicantForm):
            return form
        if isinstance(form, BaseModel):
            form = form.model_dump()
        try:
            return ApplicantForm.model_validate(form)
        except ValidationError as e:
            raise ApplicationValidationError(
                f"Please fill in all personal details ({_describe_validation_error(e)})"
            ) from e

    def _collect_documents(self, documents: DocumentsInput) -> DocumentCollector:
        if isinstance(documents, DocumentCollector):
            return documents
        collector = DocumentCollector()
        if documents is None:
            return collector
        items = documents.values() if isinstance(documents, Mapping) else documents
        for item in items:
            try:
                document = item if isinstance(item, Document) else Document.model_validate(item)
            except ValidationError as e:
                raise ApplicationValidationError(
                    f"Invalid document: {_describe_validation_error(e)}"
                ) from e
            collector.add_document(document)
        return collector

    def _check_documents(self, collector: DocumentCollector) -> None:
        for document in collector.documents():
            data_uri = parse_data_uri(document.content)
            if data_uri is None:
                logger.warning(f"Rejected document {document.name!r}: payload is not a base64 data URI")
                raise ApplicationValidationError(
                    f'Document "{document.name}" has an invalid format.',
                    document_name=document.name,
                )
            if not is_supported_mime_type(data_uri.mime_type):
                logger.warning(f"Rejected document {document.name!r}: unsupported type {data_uri.mime_type}")
                raise ApplicationValidationError(
                    f'Document "{document.name}" must be an image or a PDF, got {data_uri.mime_type}.',
                    document_name=document.name,
                )
        for doc_type in REQUIRED_DOCUMENTS:
            if not collector.has(doc_type):
                raise ApplicationValidationError(f"Please upload your {doc_type.label}.")

    def _new_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            application_id = self._id_generator()
            if application_id not in self.store:
                return application_id
            logger.warning(f"Generated id {application_id} is already taken, drawing another")
        raise RuntimeError(f"Could not generate a unique application id after {MAX_ID_ATTEMPTS} attempts")

    def _insert(self, application: LoanApplication) -> LoanApplication:
        # The id was free before the provider call; a concurrent submit may have taken it since
        for _ in range(MAX_ID_ATTEMPTS):
            try:
                return self.store.insert(application)
            except DuplicateApplicationError:
                taken = application.id
                application = LoanApplication.model_validate({**dict(application), "id": self._new_id()})
                logger.warning(f"Application id {taken} was taken during processing, stored as {application.id}")
        raise RuntimeError(f"Could not store application after {MAX_ID_ATTEMPTS} attempts")

    def _call_provider(self, candidate: LoanApplication) -> ProviderOutput:
        documents: List[Document] = candidate.document_list
        try:
            output = self.provider.process_application(candidate.form, documents)
        except Exception as e:
            logger.exception(f"Decision provider failed for application {candidate.id}")
            raise ProviderError("Processing failed", cause=e) from e

        if isinstance(output, ProviderOutput):
            return output
        try:
            return ProviderOutput.model_validate(output)
        except ValidationError as e:
            logger.error(
                f"Decision provider returned an invalid result for application {candidate.id}: "
                f"{_describe_validation_error(e)}"
            )
            raise ProviderError("Processing failed: invalid provider response", cause=e) from e
