"""Credit officer review queue endpoints.

The queue shows the applications awaiting human review, lets an officer
select one for inspection and override the selected application.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import logging

from fastapi import APIRouter

from ..api_utils import get_review_queue
from ..models import (
    ApplicationResponse,
    ApplicationSummary,
    ErrorResponse,
    OverrideRequest,
    PendingReviewsResponse,
    SelectionResponse,
    SelectRequest,
)

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = logging.getLogger(__name__)


def _selection_response(queue) -> SelectionResponse:
    application = queue.selected
    return SelectionResponse(
        selected_id=queue.selected_id,
        application=ApplicationResponse.from_application(application) if application else None,
    )


@router.get("/pending", response_model=PendingReviewsResponse, operation_id="get_pending_reviews")
async def get_pending_reviews():
    """Applications whose current decision is HUMAN_REVIEW."""
    pending = get_review_queue().pending_reviews()
    return PendingReviewsResponse(
        pending_count=len(pending),
        applications=[ApplicationSummary.from_application(app) for app in pending],
    )


@router.post("/select", response_model=SelectionResponse, operation_id="select_application")
async def select_application(request: SelectRequest):
    """Select an application for inspection.

    Selecting an unknown id is not an error; the selection is simply empty.
    """
    queue = get_review_queue()
    queue.select(request.application_id)
    return _selection_response(queue)


@router.get("/selected", response_model=SelectionResponse, operation_id="get_selected_application")
async def get_selected_application():
    """The currently selected application, as stored now."""
    return _selection_response(get_review_queue())


@router.post(
    "/selected/override",
    response_model=ApplicationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    operation_id="override_selected_application",
)
def override_selected_application(request: OverrideRequest):
    """Override the selected application. The selection is kept."""
    application = get_review_queue().override_selected(request.decision, request.comment)
    return ApplicationResponse.from_application(application)
