"""Lending API - FastAPI server for loan intake and review.

This package provides a REST API through which applicants submit loan
applications and credit officers review and override automated decisions.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
