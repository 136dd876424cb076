"""Pytest configuration and fixtures for the loan review tests.

This module provides shared fixtures: a deterministic decision provider,
sequential ids, a ticking clock and a FastAPI test client wired to them.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import base64
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from models.loan_application import (
    ApplicantForm,
    Decision,
    ExtractedFields,
    ProviderOutput,
    ValidationStatus,
)
from utils.id_generator import sequential_ids
from workflows import ApplicationStore, ApplicationWorkflow, DocumentCollector, ReviewQueue


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
PDF_BYTES = b"%PDF-1.4\n% test salary slip\n"

START_TIME = datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)


def data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class FakeDecisionProvider:
    """Decision provider returning a canned answer and recording its calls."""

    def __init__(self, decision=Decision.HUMAN_REVIEW, error=None, output=None):
        self.decision = decision
        self.error = error
        self.output = output
        self.calls = []

    def process_application(self, form, documents):
        self.calls.append((form, list(documents)))
        if self.error is not None:
            raise self.error
        if self.output is not None:
            return self.output
        return ProviderOutput(
            extracted_fields=ExtractedFields(
                full_name=form.full_name,
                dob="1990-04-12",
                age=36,
                identity_number="ABCDE1234F",
                employer_name="Infosys Ltd",
                annual_income=600000,
            ),
            validations=(
                ValidationStatus(field_name="fullName", is_valid=True, message="Matches form"),
                ValidationStatus(field_name="annualIncome", is_valid=False, message="Monthly figures ambiguous"),
            ),
            decision=self.decision,
            explanation="Income calculation is ambiguous",
            missing_data=("Bank statement",),
            user_feedback="Please upload your latest bank statement.",
        )


class TickingClock:
    """Clock advancing one minute on every call."""

    def __init__(self, start=START_TIME):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture
def applicant_form():
    """Provide the form of the reference applicant."""
    return ApplicantForm(
        full_name="A. Kumar",
        email="a.kumar@example.com",
        phone="+91 98450 00000",
        requested_amount=50000,
    )


@pytest.fixture
def documents():
    """Provide an ID and a pay stub document collector."""
    collector = DocumentCollector()
    collector.add("ID", "pan.png", data_uri(PNG_BYTES, "image/png"))
    collector.add("PAYSTUB", "salary_slip.pdf", data_uri(PDF_BYTES, "application/pdf"))
    return collector


@pytest.fixture
def provider():
    return FakeDecisionProvider()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store():
    return ApplicationStore()


@pytest.fixture
def workflow(provider, store, clock):
    """Provide a workflow with deterministic ids and time."""
    return ApplicationWorkflow(
        provider=provider,
        store=store,
        id_generator=sequential_ids(),
        clock=clock,
    )


@pytest.fixture
def review_queue(workflow):
    return ReviewQueue(workflow)


@pytest.fixture
def submitted(workflow, applicant_form, documents):
    """Provide an application processed with a HUMAN_REVIEW decision."""
    return workflow.submit(applicant_form, documents)


@pytest.fixture
def test_client(provider):
    """Create a test client for the API.

    The service is initialized with the fake provider and an in-memory
    store; the app lifespan is not run, so no LLM agent is created.

    Yields:
        TestClient: FastAPI test client
    """
    from lending_api.api import app
    from lending_api.api_utils import initialize_service, services

    initialize_service(provider=provider, store=ApplicationStore(), id_generator=sequential_ids())
    client = TestClient(app)

    yield client

    services.clear()
