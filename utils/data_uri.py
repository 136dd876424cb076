"""Helpers for documents carried as base64 data URIs.

Uploaded documents travel as ``data:<mime-type>;base64,<payload>`` strings so
they can be handed to a multimodal model without touching the filesystem.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Functions:
    parse_data_uri: Split a data URI into mime type and base64 payload.
    is_data_uri: Return True if a string has the data URI shape.
    encode_data_uri: Encode raw bytes as a data URI.
    guess_mime_type: Guess a mime type from a file name.
    is_supported_mime_type: Return True for images and PDFs.
"""

import base64
import binascii
import mimetypes
import re
from typing import NamedTuple, Optional

DEFAULT_MIME_TYPE = "application/octet-stream"

# Documents the decision model can read
PDF_MIME_TYPE = "application/pdf"

_DATA_URI_PATTERN = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)


class DataUri(NamedTuple):
    mime_type: str
    data: str

    def decode(self) -> bytes:
        return base64.b64decode(self.data, validate=True)


def parse_data_uri(value: str) -> Optional[DataUri]:
    """Split a data URI into its mime type and base64 payload.

    Args:
        value: Candidate data URI string.

    Returns:
        DataUri if the value matches ``data:<mime>;base64,<data>`` and the
        payload is valid base64, None otherwise.
    """
    if not isinstance(value, str):
        return None
    match = _DATA_URI_PATTERN.match(value.strip())
    if not match:
        return None
    mime_type, data = match.group(1).strip(), match.group(2).strip()
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return None
    return DataUri(mime_type, data)


def is_data_uri(value: str) -> bool:
    return parse_data_uri(value) is not None


def guess_mime_type(file_name: str) -> str:
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or DEFAULT_MIME_TYPE


def encode_data_uri(data: bytes, file_name: str = "", mime_type: Optional[str] = None) -> str:
    """Encode raw bytes as a data URI.

    Args:
        data: File contents.
        file_name: Original file name, used to guess the mime type.
        mime_type: Explicit mime type; takes precedence over the guess.

    Returns:
        The ``data:<mime>;base64,<payload>`` string.
    """
    mime_type = mime_type or guess_mime_type(file_name)
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def is_supported_mime_type(mime_type: str) -> bool:
    mime_type = mime_type.lower()
    return mime_type.startswith("image/") or mime_type == PDF_MIME_TYPE
