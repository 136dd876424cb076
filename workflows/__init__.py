"""Workflows package for the loan application lifecycle.

This package provides the application state machine, the application store
and the reviewer queue built on top of them.

Author: Pat G Cappelaere, IBM Federal Consulting
"""

from workflows.application_store import ApplicationStore
from workflows.application_workflow import (
    ApplicationWorkflow,
    DecisionProvider,
    apply_override,
    process_application,
)
from workflows.document_collector import DocumentCollector
from workflows.errors import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    DuplicateApplicationError,
    InvalidTransitionError,
    LoanWorkflowError,
    PersistenceError,
    ProviderError,
)
from workflows.review_queue import ReviewQueue

__all__ = [
    'ApplicationStore',
    'ApplicationWorkflow',
    'DecisionProvider',
    'DocumentCollector',
    'ReviewQueue',
    'apply_override',
    'process_application',
    'LoanWorkflowError',
    'ApplicationValidationError',
    'ProviderError',
    'ApplicationNotFoundError',
    'DuplicateApplicationError',
    'InvalidTransitionError',
    'PersistenceError',
]
