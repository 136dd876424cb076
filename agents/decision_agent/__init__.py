"""Decision Agent package.

LLM-backed decision provider for loan applications.
"""

from .agent import DecisionAgent
from .llm_service import DecisionProviderError, LLMService

__all__ = ["DecisionAgent", "DecisionProviderError", "LLMService"]
