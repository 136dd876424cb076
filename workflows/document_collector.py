"""Collects the supporting documents of an application before submission.

Documents are keyed by type: adding a second document of a type replaces the
first one.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    >>> collector = DocumentCollector()
    >>> collector.add_file(DocumentType.ID, "pan.png", pan_bytes)
    >>> collector.add_file(DocumentType.PAYSTUB, "slip.pdf", slip_bytes)
    >>> [d.name for d in collector.documents()]
    ['pan.png', 'slip.pdf']
"""

import logging
from typing import Dict, List, Optional, Union

from models.loan_application import Document, DocumentType
from utils.data_uri import encode_data_uri

logger = logging.getLogger(__name__)


class DocumentCollector:
    """Holds at most one document per document type."""

    def __init__(self):
        self._documents: Dict[DocumentType, Document] = {}

    def add_document(self, document: Document) -> Document:
        """Attach a document, replacing any previous one of the same type."""
        previous = self._documents.get(document.doc_type)
        if previous is not None:
            logger.info(
                f"Replacing {document.doc_type.value} document {previous.name!r} with {document.name!r}"
            )
        self._documents[document.doc_type] = document
        return document

    def add(self, doc_type: Union[DocumentType, str], name: str, content: str) -> Document:
        """Attach a document whose payload is already a data URI."""
        return self.add_document(Document(doc_type=DocumentType(doc_type), name=name, content=content))

    def add_file(
        self,
        doc_type: Union[DocumentType, str],
        name: str,
        data: bytes,
        mime_type: Optional[str] = None,
    ) -> Document:
        """Attach raw file bytes, encoding them as a data URI."""
        return self.add(doc_type, name, encode_data_uri(data, name, mime_type))

    def has(self, doc_type: Union[DocumentType, str]) -> bool:
        return DocumentType(doc_type) in self._documents

    def get(self, doc_type: Union[DocumentType, str]) -> Optional[Document]:
        return self._documents.get(DocumentType(doc_type))

    def documents(self) -> List[Document]:
        """Documents ordered by document type declaration."""
        return [self._documents[t] for t in DocumentType if t in self._documents]

    def as_mapping(self) -> Dict[DocumentType, Document]:
        return {doc.doc_type: doc for doc in self.documents()}

    def __len__(self) -> int:
        return len(self._documents)
