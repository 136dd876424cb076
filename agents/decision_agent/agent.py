"""Decision Agent for loan applications.

This module contains the DecisionAgent class, the LLM-backed decision
provider. Given the applicant's form data and documents it asks a
multimodal model to extract the applicant's details, validate them and
propose one of AUTO_APPROVE, AUTO_REJECT, HUMAN_REVIEW or INCOMPLETE.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    Basic usage of the Decision Agent::

        from agents.decision_agent import DecisionAgent
        from workflows import ApplicationWorkflow

        agent = DecisionAgent(model="gemini/gemini-1.5-pro")
        workflow = ApplicationWorkflow(provider=agent)
        application = workflow.submit(form, collector)

        print(application.result.decision)
"""

import logging
import time
from typing import Optional, Sequence

from models.loan_application import ApplicantForm, Document, ProviderOutput
from utils.config import config
from utils.llm_config import configure_litellm
from utils.logging_config import log_performance

from .llm_service import LLMService

logger = logging.getLogger(__name__)


class DecisionAgent:
    """Decision provider backed by a LiteLLM-compatible model.

    Args:
        model: Primary model. Defaults to PRIMARY_MODEL from .env.
        fallback_model: Model tried when the primary one keeps failing.
            Defaults to FALLBACK_MODEL from .env.
        max_retries: Attempts per model. Defaults to MAX_RETRIES from .env.
        temperature: Sampling temperature. Defaults to LLM_TEMPERATURE.
        max_tokens: Response token budget. Defaults to LLM_MAX_TOKENS.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        max_retries: Optional[int] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        configure_litellm()
        self.model = model or config.PRIMARY_MODEL
        self.fallback_model = fallback_model if fallback_model is not None else config.FALLBACK_MODEL
        self.max_retries = max_retries if max_retries is not None else config.MAX_RETRIES
        self.temperature = temperature if temperature is not None else config.LLM_TEMPERATURE
        self.max_tokens = max_tokens if max_tokens is not None else config.LLM_MAX_TOKENS
        logger.info(f"Decision Agent initialized with model {self.model}")

    def process_application(
        self,
        form: ApplicantForm,
        documents: Sequence[Document],
    ) -> ProviderOutput:
        """Extract applicant data and propose a decision.

        Args:
            form: Applicant form data.
            documents: Documents in upload order, payloads as data URIs.

        Returns:
            The model's validated answer.

        Raises:
            DecisionProviderError: If no valid answer could be obtained.
        """
        logger.info(f"Requesting decision for {form.full_name} ({len(documents)} document(s))")
        start = time.time()
        output = LLMService.request_decision_with_retry(
            form,
            documents,
            model=self.model,
            fallback_model=self.fallback_model,
            max_retries=self.max_retries,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        log_performance(logger, "Decision provider call", time.time() - start)
        return output
