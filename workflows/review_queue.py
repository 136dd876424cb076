"""Reviewer-side view of the application store.

The queue keeps a single piece of state, the id of the application a credit
officer is looking at. Everything else is read from the store on demand, so
counts and the selected record always reflect the latest overrides.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import logging
from typing import List, Optional, Union

from models.loan_application import Decision, LoanApplication

from .application_workflow import ApplicationWorkflow
from .errors import ApplicationNotFoundError

logger = logging.getLogger(__name__)


class ReviewQueue:
    """Selection and filtering over the applications of a workflow."""

    def __init__(self, workflow: ApplicationWorkflow):
        self.workflow = workflow
        self.selected_id: Optional[str] = None

    @property
    def store(self):
        return self.workflow.store

    def applications(
        self,
        decision: Optional[Decision] = None,
        status=None,
    ) -> List[LoanApplication]:
        """Stored applications, newest first, optionally filtered."""
        applications = self.store.list()
        if decision is not None:
            applications = [app for app in applications if app.decision == decision]
        if status is not None:
            applications = [app for app in applications if app.status == status]
        return applications

    def pending_reviews(self) -> List[LoanApplication]:
        return self.applications(decision=Decision.HUMAN_REVIEW)

    def pending_review_count(self) -> int:
        """Number of stored applications whose decision is HUMAN_REVIEW."""
        return len(self.pending_reviews())

    def select(self, application_id: Optional[str]) -> Optional[LoanApplication]:
        """Select an application for inspection.

        Selecting an id the store does not hold leaves nothing selected.
        """
        application = self.store.find(application_id)
        self.selected_id = application.id if application else None
        if application is None and application_id is not None:
            logger.debug(f"Ignoring selection of unknown application {application_id}")
        return application

    def clear_selection(self) -> None:
        self.selected_id = None

    @property
    def selected(self) -> Optional[LoanApplication]:
        """The selected application as currently stored, or None."""
        return self.store.find(self.selected_id)

    def override_selected(self, new_decision: Union[Decision, str], comment: str = "") -> LoanApplication:
        """Override the selected application. The selection is kept.

        Raises:
            ApplicationNotFoundError: If nothing is selected.
        """
        if self.selected_id is None:
            raise ApplicationNotFoundError(None)
        return self.workflow.override(self.selected_id, new_decision, comment)
