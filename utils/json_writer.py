"""Utility for writing loan applications to JSON files.

This module provides functions for saving application records as JSON
snapshots and loading them back, so an application store can survive a
restart.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Functions:
    get_application_json_path: Build the snapshot path for an application.
    save_application_json: Save a loan application to a JSON file.
    load_application_json: Load a loan application from a JSON file.
    load_applications_dir: Load every snapshot found in a directory.

Example:
    >>> from pathlib import Path
    >>> from utils.json_writer import save_application_json
    >>>
    >>> output_path = Path("outputs/applications") / f"{application.id}.json"
    >>> success = save_application_json(application, output_path)
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from models.loan_application import LoanApplication

logger = logging.getLogger(__name__)


def get_application_json_path(output_dir: Path, application_id: str) -> Path:
    return Path(output_dir) / f"{application_id}.json"


def save_application_json(
    application: LoanApplication,
    output_path: Path,
    overwrite: bool = True
) -> bool:
    """Save a loan application to a JSON file.

    Args:
        application (LoanApplication): Record to save.
        output_path (Path): Path where the JSON file should be saved.
        overwrite (bool): If True, overwrites existing file. If False,
            skips if file exists. Defaults to True because an override
            replaces the whole record.

    Returns:
        bool: True if saved successfully, False if skipped or failed.
    """
    try:
        if output_path.exists() and not overwrite:
            logger.info(f"JSON file already exists, skipping: {output_path.name}")
            return False

        output_path.parent.mkdir(parents=True, exist_ok=True)
        data_dict = application.model_dump(mode='json')

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data_dict, f, indent=2, ensure_ascii=False)

        logger.debug(f"Saved application JSON: {output_path.name}")
        return True

    except Exception as e:
        logger.error(f"Error saving JSON to {output_path}: {str(e)}")
        return False


def load_application_json(json_path: Path) -> Union[LoanApplication, None]:
    """Load a loan application from a JSON file.

    Returns:
        Union[LoanApplication, None]: The validated record, or None if the
            file cannot be read or fails validation.
    """
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            data_dict = json.load(f)

        return LoanApplication.model_validate(data_dict)

    except Exception as e:
        logger.error(f"Error loading JSON from {json_path}: {str(e)}")
        return None


def load_applications_dir(directory: Path) -> List[LoanApplication]:
    """Load all application snapshots in a directory, oldest first.

    Records are ordered by the timestamp of their first audit entry; files
    that fail to load are skipped with an error logged.
    """
    directory = Path(directory)
    if not directory.exists():
        logger.info(f"No application snapshots found in {directory}")
        return []

    applications = []
    for json_path in sorted(directory.glob("*.json")):
        application = load_application_json(json_path)
        if application is not None:
            applications.append(application)

    applications.sort(key=lambda app: app.audit_trail[0].timestamp.isoformat() if app.audit_trail else "")
    logger.info(f"Loaded {len(applications)} applications from {directory}")
    return applications
