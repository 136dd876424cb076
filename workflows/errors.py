"""Exceptions raised by the loan application workflow.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Hierarchy::

    LoanWorkflowError
    ├── ApplicationValidationError   bad form data or document payload
    ├── ProviderError                decision provider failed or answered badly
    ├── ApplicationNotFoundError     unknown application id
    ├── DuplicateApplicationError    store already holds the id
    ├── InvalidTransitionError       operation not allowed in the current state
    └── PersistenceError             snapshot could not be written
"""

from typing import Optional


class LoanWorkflowError(Exception):
    """Base class for all workflow errors."""


class ApplicationValidationError(LoanWorkflowError):
    """Submission rejected before the decision provider was called.

    Attributes:
        document_name: Name of the offending document, if the problem is a
            document payload.
    """

    def __init__(self, message: str, document_name: Optional[str] = None):
        super().__init__(message)
        self.document_name = document_name


class ProviderError(LoanWorkflowError):
    """The decision provider failed; no application was created."""

    def __init__(self, message: str = "Processing failed", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ApplicationNotFoundError(LoanWorkflowError):
    def __init__(self, application_id: Optional[str]):
        super().__init__(f"Application {application_id!r} not found")
        self.application_id = application_id


class DuplicateApplicationError(LoanWorkflowError):
    def __init__(self, application_id: str):
        super().__init__(f"Application {application_id!r} already exists")
        self.application_id = application_id


class InvalidTransitionError(LoanWorkflowError):
    pass


class PersistenceError(LoanWorkflowError):
    """A snapshot could not be written; the in-memory record was left unchanged."""

    def __init__(self, application_id: str, path):
        super().__init__(f"Failed to persist application {application_id!r} to {path}")
        self.application_id = application_id
        self.path = path
