"""Tests for the application state machine.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import pytest

from models.loan_application import (
    ApplicationStatus,
    AuditAction,
    AuditActor,
    Decision,
    Document,
    DocumentType,
    LoanApplication,
    ProviderOutput,
)
from workflows import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    InvalidTransitionError,
    ProviderError,
    apply_override,
    process_application,
)

from conftest import PDF_BYTES, PNG_BYTES, START_TIME, FakeDecisionProvider, data_uri

PRESERVED_RESULT_FIELDS = {"extracted_fields", "validations", "missing_data", "user_feedback", "timestamp"}


class TestSubmit:
    """Test application submission."""

    def test_successful_submit_creates_completed_application(self, workflow, applicant_form, documents, store):
        """A successful submit stores one COMPLETED application with one audit entry."""
        application = workflow.submit(applicant_form, documents)

        assert application.status == ApplicationStatus.COMPLETED
        assert application.result is not None
        assert len(application.audit_trail) == 1
        entry = application.audit_trail[0]
        assert entry.action == AuditAction.APPLICATION_PROCESSED
        assert entry.actor == AuditActor.AI_SYSTEM
        assert entry.comment == application.result.explanation
        assert store.get(application.id) == application

    def test_result_timestamp_is_set_by_workflow(self, workflow, applicant_form, documents):
        """The result timestamp comes from the workflow clock."""
        application = workflow.submit(applicant_form, documents)

        assert application.result.timestamp == START_TIME
        assert application.audit_trail[0].timestamp == START_TIME

    def test_reference_scenario(self, workflow, applicant_form, documents):
        """HUMAN_REVIEW submission followed by an approval override."""
        application = workflow.submit(applicant_form, documents)
        assert application.status == ApplicationStatus.COMPLETED
        assert application.result.decision == Decision.HUMAN_REVIEW
        assert len(application.audit_trail) == 1

        overridden = workflow.override(application.id, Decision.AUTO_APPROVE, "verified manually")
        assert overridden.status == ApplicationStatus.OVERRIDDEN
        assert overridden.result.decision == Decision.AUTO_APPROVE
        assert overridden.result.explanation == "OVERRIDDEN BY OFFICER: verified manually"
        assert len(overridden.audit_trail) == 2

    def test_provider_receives_form_and_ordered_documents(self, workflow, provider, applicant_form, documents):
        """The provider gets the form and the documents in type order."""
        workflow.submit(applicant_form, documents)

        form, sent_documents = provider.calls[0]
        assert form == applicant_form
        assert [d.doc_type for d in sent_documents] == [DocumentType.ID, DocumentType.PAYSTUB]

    def test_submit_accepts_form_mapping(self, workflow, documents):
        """A plain mapping is accepted as form data."""
        application = workflow.submit(
            {"full_name": "Priya Sharma", "email": "priya@example.com", "requested_amount": 120000},
            documents,
        )

        assert application.form.full_name == "Priya Sharma"
        assert application.form.phone == ""

    def test_later_document_of_same_type_replaces_earlier(self, workflow, applicant_form):
        """Two documents of one type in a list keep only the second."""
        first = Document(doc_type=DocumentType.ID, name="old_id.png", content=data_uri(b"old", "image/png"))
        second = Document(doc_type=DocumentType.ID, name="new_id.png", content=data_uri(b"new", "image/png"))
        slip = Document(doc_type=DocumentType.PAYSTUB, name="slip.pdf", content=data_uri(PDF_BYTES, "application/pdf"))

        application = workflow.submit(applicant_form, [first, slip, second])

        assert list(application.documents) == [DocumentType.ID, DocumentType.PAYSTUB]
        assert application.documents[DocumentType.ID] == second

    @pytest.mark.parametrize("missing", ["full_name", "email"])
    def test_missing_required_form_field_is_rejected(self, workflow, provider, store, documents, missing):
        """Blank name or email is a validation error; nothing is called or stored."""
        form = {"full_name": "A. Kumar", "email": "a.kumar@example.com", "requested_amount": 50000}
        form[missing] = "   "

        with pytest.raises(ApplicationValidationError):
            workflow.submit(form, documents)

        assert provider.calls == []
        assert len(store) == 0

    @pytest.mark.parametrize("amount", [0, -1, float("inf"), float("nan"), "inf"])
    def test_amount_must_be_positive_and_finite(self, workflow, provider, store, documents, amount):
        with pytest.raises(ApplicationValidationError):
            workflow.submit({"full_name": "A. Kumar", "email": "a@example.com", "requested_amount": amount}, documents)

        assert provider.calls == []
        assert len(store) == 0

    @pytest.mark.parametrize("present,missing_label", [
        ([], "Government Issued ID"),
        (["ID"], "Salary Slip / ITR-V"),
        (["PAYSTUB"], "Government Issued ID"),
    ])
    def test_both_documents_are_required(self, workflow, provider, store, applicant_form, documents, present, missing_label):
        """An application without an ID or an income proof never reaches the provider."""
        partial = [documents.get(doc_type) for doc_type in present]

        with pytest.raises(ApplicationValidationError) as exc_info:
            workflow.submit(applicant_form, partial)

        assert missing_label in str(exc_info.value)
        assert provider.calls == []
        assert len(store) == 0

    def test_unsupported_document_type_is_rejected(self, workflow, provider, store, applicant_form, documents):
        """Only images and PDFs are accepted."""
        sheet = Document(
            doc_type=DocumentType.PAYSTUB,
            name="salary.xlsx",
            content=data_uri(b"PK\x03\x04", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
        )

        with pytest.raises(ApplicationValidationError) as exc_info:
            workflow.submit(applicant_form, [documents.get("ID"), sheet])

        assert exc_info.value.document_name == "salary.xlsx"
        assert provider.calls == []
        assert len(store) == 0

    def test_malformed_document_payload_is_rejected(self, workflow, provider, store, applicant_form):
        """A payload that is not a data URI names the offending document."""
        documents = [
            Document(doc_type=DocumentType.ID, name="pan.png", content=data_uri(PNG_BYTES, "image/png")),
            Document(doc_type=DocumentType.PAYSTUB, name="slip.pdf", content="not-a-data-uri"),
        ]

        with pytest.raises(ApplicationValidationError) as exc_info:
            workflow.submit(applicant_form, documents)

        assert exc_info.value.document_name == "slip.pdf"
        assert "slip.pdf" in str(exc_info.value)
        assert provider.calls == []
        assert len(store) == 0

    def test_provider_failure_creates_nothing(self, store, clock, applicant_form, documents):
        """A failing provider surfaces as ProviderError and stores nothing."""
        from utils.id_generator import sequential_ids
        from workflows import ApplicationWorkflow

        workflow = ApplicationWorkflow(
            provider=FakeDecisionProvider(error=TimeoutError("quota exceeded")),
            store=store,
            id_generator=sequential_ids(),
            clock=clock,
        )

        with pytest.raises(ProviderError) as exc_info:
            workflow.submit(applicant_form, documents)

        assert isinstance(exc_info.value.cause, TimeoutError)
        assert "APP-0001" not in store
        assert len(store) == 0

    def test_retry_after_failure_is_a_new_attempt(self, store, clock, applicant_form, documents):
        """Resubmitting after a failure creates a record under a fresh id."""
        from utils.id_generator import sequential_ids
        from workflows import ApplicationWorkflow

        provider = FakeDecisionProvider(error=ConnectionError("network down"))
        workflow = ApplicationWorkflow(provider=provider, store=store, id_generator=sequential_ids(), clock=clock)

        with pytest.raises(ProviderError):
            workflow.submit(applicant_form, documents)

        provider.error = None
        application = workflow.submit(applicant_form, documents)

        assert application.id == "APP-0002"
        assert [app.id for app in store.list()] == ["APP-0002"]

    @pytest.mark.parametrize("decision", ["APPROVED", "", None, 3])
    def test_unrecognized_provider_decision_is_a_provider_error(self, store, clock, applicant_form, documents, decision):
        """A provider answer with a decision outside the four values is rejected."""
        from workflows import ApplicationWorkflow

        raw = {"decision": decision, "explanation": "looks fine", "userFeedback": ""}
        workflow = ApplicationWorkflow(provider=FakeDecisionProvider(output=raw), store=store, clock=clock)

        with pytest.raises(ProviderError):
            workflow.submit(applicant_form, documents)

        assert len(store) == 0

    def test_camel_case_provider_answer_is_accepted(self, store, clock, applicant_form, documents):
        """A raw camelCase answer is validated into a result."""
        from workflows import ApplicationWorkflow

        raw = {
            "extractedFields": {"fullName": "A. Kumar", "identityNumber": None, "annualIncome": 480000},
            "validations": [{"fieldName": "identityNumber", "isValid": False, "message": "Missing PAN"}],
            "decision": "auto reject",
            "explanation": "KYC identity number missing",
            "missingData": ["PAN or Aadhaar number"],
            "userFeedback": "Upload a clearer ID.",
        }
        workflow = ApplicationWorkflow(provider=FakeDecisionProvider(output=raw), store=store, clock=clock)

        application = workflow.submit(applicant_form, documents)

        assert application.result.decision == Decision.AUTO_REJECT
        assert application.result.extracted_fields.identity_number is None
        assert application.result.validations[0].field_name == "identityNumber"
        assert application.result.missing_data == ("PAN or Aadhaar number",)

    def test_generated_id_collision_draws_again(self, store, clock, applicant_form, documents):
        """An id already in the store is never reused."""
        from workflows import ApplicationWorkflow

        ids = iter(["DUPLICATE", "DUPLICATE", "FRESH"])
        workflow = ApplicationWorkflow(
            provider=FakeDecisionProvider(), store=store, id_generator=lambda: next(ids), clock=clock
        )

        first = workflow.submit(applicant_form, documents)
        second = workflow.submit(applicant_form, documents)

        assert (first.id, second.id) == ("DUPLICATE", "FRESH")

    def test_id_taken_during_processing_draws_again(self, store, clock, applicant_form, documents):
        """A concurrent submit claiming the id while the provider runs does not lose the result."""
        from workflows import ApplicationWorkflow

        class RacingProvider(FakeDecisionProvider):
            def process_application(self, form, documents):
                output = super().process_application(form, documents)
                if len(self.calls) == 1:
                    rival = process_application(
                        LoanApplication(id="RACE", form=form, status=ApplicationStatus.PROCESSING),
                        output,
                        START_TIME,
                    )
                    store.insert(rival)
                return output

        ids = iter(["RACE", "AFTER-RACE"])
        provider = RacingProvider()
        workflow = ApplicationWorkflow(provider=provider, store=store, id_generator=lambda: next(ids), clock=clock)

        application = workflow.submit(applicant_form, documents)

        assert application.id == "AFTER-RACE"
        assert store.get("AFTER-RACE") == application
        assert len(provider.calls) == 1
        assert len(store) == 2


class TestOverride:
    """Test manual overrides."""

    def test_override_replaces_decision_and_explanation_only(self, workflow, submitted):
        """Everything but decision and explanation is carried over."""
        overridden = workflow.override(submitted.id, Decision.AUTO_APPROVE, "reason")

        assert overridden.status == ApplicationStatus.OVERRIDDEN
        assert overridden.result.decision == Decision.AUTO_APPROVE
        assert overridden.result.explanation == "OVERRIDDEN BY OFFICER: reason"
        assert overridden.result.model_dump(include=PRESERVED_RESULT_FIELDS) == \
            submitted.result.model_dump(include=PRESERVED_RESULT_FIELDS)
        assert overridden.form == submitted.form
        assert overridden.documents == submitted.documents
        assert overridden.id == submitted.id

    def test_override_appends_audit_entry(self, workflow, submitted):
        overridden = workflow.override(submitted.id, Decision.AUTO_REJECT, "reason")

        assert overridden.audit_trail[:1] == submitted.audit_trail
        assert len(overridden.audit_trail) == 2
        entry = overridden.audit_trail[-1]
        assert entry.action == AuditAction.MANUAL_OVERRIDE
        assert entry.actor == AuditActor.CREDIT_OFFICER
        assert entry.comment == "reason"

    def test_override_leaves_prior_snapshot_untouched(self, workflow, submitted):
        """The record held before the override keeps its original result."""
        workflow.override(submitted.id, Decision.AUTO_APPROVE, "reason")

        assert submitted.status == ApplicationStatus.COMPLETED
        assert submitted.result.decision == Decision.HUMAN_REVIEW
        assert len(submitted.audit_trail) == 1

    def test_override_is_stored(self, workflow, store, submitted):
        overridden = workflow.override(submitted.id, "AUTO_APPROVE", "reason")

        assert store.get(submitted.id) == overridden

    def test_re_override_keeps_growing_the_trail(self, workflow, submitted):
        """Overriding an OVERRIDDEN application is allowed and appends again."""
        first = workflow.override(submitted.id, Decision.AUTO_APPROVE, "first look")
        second = workflow.override(submitted.id, Decision.AUTO_REJECT, "second look")

        assert second.status == ApplicationStatus.OVERRIDDEN
        assert second.result.decision == Decision.AUTO_REJECT
        assert second.result.explanation == "OVERRIDDEN BY OFFICER: second look"
        assert second.audit_trail[:2] == first.audit_trail
        assert [e.comment for e in second.audit_trail[1:]] == ["first look", "second look"]

    def test_override_with_same_decision_still_transitions(self, workflow, submitted):
        overridden = workflow.override(submitted.id, Decision.HUMAN_REVIEW, "keep in review")

        assert overridden.status == ApplicationStatus.OVERRIDDEN
        assert overridden.result.decision == Decision.HUMAN_REVIEW
        assert len(overridden.audit_trail) == 2

    def test_override_unknown_id_raises_not_found(self, workflow, store, submitted):
        with pytest.raises(ApplicationNotFoundError):
            workflow.override("MISSING", Decision.AUTO_APPROVE, "reason")

        assert store.get(submitted.id) == submitted

    def test_override_with_unknown_decision_is_rejected(self, workflow, store, submitted):
        with pytest.raises(ApplicationValidationError):
            workflow.override(submitted.id, "MAYBE", "reason")

        assert store.get(submitted.id) == submitted


class TestTransitions:
    """Test the pure transition functions."""

    def test_process_application_requires_processing_state(self, applicant_form):
        candidate = LoanApplication(id="APP-1", form=applicant_form)
        output = ProviderOutput(decision=Decision.INCOMPLETE, explanation="DOB missing")

        with pytest.raises(InvalidTransitionError):
            process_application(candidate, output, START_TIME)

    def test_apply_override_requires_result(self, applicant_form):
        candidate = LoanApplication(id="APP-1", form=applicant_form, status=ApplicationStatus.PROCESSING)

        with pytest.raises(InvalidTransitionError):
            apply_override(candidate, Decision.AUTO_APPROVE, "reason", START_TIME)

    def test_process_then_override(self, applicant_form):
        candidate = LoanApplication(id="APP-1", form=applicant_form, status=ApplicationStatus.PROCESSING)
        output = ProviderOutput(decision=Decision.INCOMPLETE, explanation="DOB missing")

        completed = process_application(candidate, output, START_TIME)
        overridden = apply_override(completed, Decision.AUTO_REJECT, "no DOB on file", START_TIME)

        assert completed.status == ApplicationStatus.COMPLETED
        assert overridden.status == ApplicationStatus.OVERRIDDEN
        assert overridden.result.timestamp == completed.result.timestamp
