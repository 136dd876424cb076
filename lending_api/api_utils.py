"""Shared state and helpers for API routers.

This module holds the workflow and review queue used by the routers, kept
apart from api.py to avoid circular imports.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from utils.config import config
from utils.id_generator import IdGenerator, get_id_generator
from workflows import ApplicationStore, ApplicationWorkflow, DecisionProvider, ReviewQueue

logger = logging.getLogger(__name__)

# Global service registry (shared with api.py and the routers)
services: Dict[str, Any] = {}


def initialize_service(
    provider: Optional[DecisionProvider] = None,
    store: Optional[ApplicationStore] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ApplicationWorkflow:
    """Create the workflow and review queue used by the API.

    Args:
        provider: Decision provider. Defaults to the LLM-backed DecisionAgent.
        store: Application store. Defaults to an in-memory store, restored
            from OUTPUTS_DIR/applications when PERSIST_APPLICATIONS is set.
        id_generator: Id source. Defaults to the ID_STRATEGY setting.

    Returns:
        The initialized workflow.
    """
    if provider is None:
        from agents.decision_agent import DecisionAgent
        provider = DecisionAgent()

    if store is None:
        if config.PERSIST_APPLICATIONS:
            store = ApplicationStore.load(config.applications_dir())
        else:
            store = ApplicationStore()

    workflow = ApplicationWorkflow(
        provider=provider,
        store=store,
        id_generator=id_generator or get_id_generator(config.ID_STRATEGY),
    )
    services["workflow"] = workflow
    services["review_queue"] = ReviewQueue(workflow)
    logger.info(f"API initialized with {type(provider).__name__} ({len(store)} stored applications)")
    return workflow


def is_initialized() -> bool:
    return "workflow" in services


def get_workflow() -> ApplicationWorkflow:
    """Get the application workflow.

    Raises:
        HTTPException: If the service has not been initialized.
    """
    if "workflow" not in services:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return services["workflow"]


def get_review_queue() -> ReviewQueue:
    if "review_queue" not in services:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return services["review_queue"]
