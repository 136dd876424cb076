"""LiteLLM configuration utilities.

This module centralizes LiteLLM log suppression so the decision agent and
the example scripts don't repeat the same boilerplate.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import os

_configured = False


def configure_litellm() -> None:
    """Suppress LiteLLM verbose logging.

    Call once at agent initialization. Safe to call multiple times.
    """
    global _configured
    if _configured:
        return

    os.environ.setdefault("LITELLM_LOG", "ERROR")

    # Import here so the environment is set before litellm reads it
    import litellm
    litellm.suppress_debug_info = True

    _configured = True
