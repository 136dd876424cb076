"""LLM service for loan decisioning.

This module handles all LLM interactions for extracting applicant data from
documents and proposing a loan decision.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from litellm import completion
from pydantic import ValidationError

from models.loan_application import ApplicantForm, Document, ProviderOutput
from utils.config import config
from utils.data_uri import parse_data_uri

from .prompts import USER_PROMPT, get_system_prompt

logger = logging.getLogger(__name__)


class DecisionProviderError(Exception):
    """Raised when the model call fails or its answer cannot be used."""


class LLMService:
    """Service for LLM-based extraction and decision operations."""

    @staticmethod
    def extract_json_from_response(response_text: str) -> Optional[dict]:
        """Extract JSON object from LLM response text.

        Attempts to parse the response as JSON. If that fails, removes markdown
        code fences and tries again, then uses regex to find JSON objects.

        Args:
            response_text: Response text from the LLM.

        Returns:
            Parsed JSON dictionary if found, None otherwise.
        """
        try:
            data = json.loads(response_text)
            return data if isinstance(data, dict) else None
        except json.JSONDecodeError:
            pass

        # Remove markdown code fences if present
        cleaned_text = response_text.strip()
        if cleaned_text.startswith('```'):
            cleaned_text = re.sub(r'^```(?:json)?\s*\n?', '', cleaned_text)
            cleaned_text = re.sub(r'\n?```\s*$', '', cleaned_text)

            try:
                data = json.loads(cleaned_text)
                if isinstance(data, dict):
                    return data
            except json.JSONDecodeError:
                pass

        # Try to find JSON object in the response using regex
        json_match = re.search(r'\{.*\}', cleaned_text, re.DOTALL)
        if json_match:
            try:
                return json.loads(json_match.group())
            except json.JSONDecodeError:
                pass

        logger.error(f"Could not extract JSON from response: {response_text[:200]}")
        return None

    @staticmethod
    def document_part(document: Document) -> Dict[str, Any]:
        """Convert a document into a multimodal message part.

        Images are sent as ``image_url`` parts, anything else (PDFs) as
        ``file`` parts; both carry the data URI unchanged.

        Raises:
            DecisionProviderError: If the payload is not a base64 data URI.
        """
        data_uri = parse_data_uri(document.content)
        if data_uri is None:
            raise DecisionProviderError(f'Document "{document.name}" has an invalid format.')
        if data_uri.mime_type.startswith("image/"):
            return {"type": "image_url", "image_url": {"url": document.content}}
        return {"type": "file", "file": {"file_data": document.content, "filename": document.name}}

    @staticmethod
    def build_messages(form: ApplicantForm, documents: Sequence[Document]) -> List[Dict[str, Any]]:
        """Build the chat messages for one application."""
        system_prompt = get_system_prompt(
            full_name=form.full_name,
            requested_amount=form.requested_amount,
            currency=config.CURRENCY_SYMBOL,
        )
        user_content: List[Dict[str, Any]] = [{"type": "text", "text": USER_PROMPT}]
        for document in documents:
            user_content.append({"type": "text", "text": f"Document ({document.doc_type.value}): {document.name}"})
            user_content.append(LLMService.document_part(document))
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]

    @staticmethod
    def parse_provider_output(json_data: dict) -> ProviderOutput:
        """Validate the model's JSON answer.

        Raises:
            DecisionProviderError: If the answer does not match the expected
                shape or its decision is not one of the four known values.
        """
        try:
            return ProviderOutput.model_validate(json_data)
        except ValidationError as e:
            raise DecisionProviderError(f"Model answer failed validation: {e}") from e

    @staticmethod
    def request_decision(
        form: ApplicantForm,
        documents: Sequence[Document],
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 4000,
    ) -> ProviderOutput:
        """Ask the model for an extraction and decision, single attempt.

        Raises:
            DecisionProviderError: On any call, parsing or validation failure.
        """
        messages = LLMService.build_messages(form, documents)
        try:
            response = completion(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise DecisionProviderError(f"Model call to {model} failed: {e}") from e

        response_text = response.choices[0].message.content or ""
        json_data = LLMService.extract_json_from_response(str(response_text))
        if not json_data:
            raise DecisionProviderError("Failed to extract JSON from model response")

        output = LLMService.parse_provider_output(json_data)
        logger.info(f"Model {model} proposed decision {output.decision.value}")
        return output

    @staticmethod
    def request_decision_with_retry(
        form: ApplicantForm,
        documents: Sequence[Document],
        model: str,
        fallback_model: Optional[str],
        max_retries: int,
        temperature: float = 0.1,
        max_tokens: int = 4000,
    ) -> ProviderOutput:
        """Request a decision with retry logic and fallback model.

        Args:
            form: Applicant form data.
            documents: Documents in upload order.
            model: Primary LLM model.
            fallback_model: Model tried after the primary one is exhausted.
            max_retries: Maximum attempts per model.

        Returns:
            The first valid ProviderOutput.

        Raises:
            DecisionProviderError: If every attempt failed; chained to the
                last failure.
        """
        models = [model] + ([fallback_model] if fallback_model and fallback_model != model else [])
        last_error: Optional[DecisionProviderError] = None

        for current_model in models:
            if current_model != model:
                logger.warning(f"Primary model failed after {max_retries} attempts, trying fallback: {current_model}")
            for attempt in range(1, max_retries + 1):
                if attempt > 1:
                    logger.info(f"Retry attempt {attempt}/{max_retries} with model: {current_model}")
                try:
                    return LLMService.request_decision(
                        form, documents, current_model, temperature=temperature, max_tokens=max_tokens
                    )
                except DecisionProviderError as e:
                    logger.warning(f"Decision attempt {attempt} with {current_model} failed: {e}")
                    last_error = e

        logger.error("Failed to obtain a decision after all attempts")
        raise DecisionProviderError("Failed to obtain a decision after all attempts") from last_error
