"""Abstract base class for data sources.

A data source persists whole documents (content, metadata and vector) keyed
by document id.  It never talks to the vector store; the memory correlates
the two through ids.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from ltm.models.descriptors import BackendDescriptor
from ltm.models.document import Document


# Concrete implementation: SQLiteDataSource (ltm/providers/datasource/)
class IDataSource(ABC):
    """Contract for document stores used by the memory."""

    @abstractmethod
    async def get_document(self, document_id: UUID) -> Document:
        """Return the document stored under *document_id*.

        Raises
        ------
        ltm.utils.errors.DocumentNotFoundError
            If nothing is stored under the id.
        ltm.utils.errors.DocumentEncodingError
            If the stored value cannot be decoded.
        """

    @abstractmethod
    async def get_documents(self, document_ids: list[UUID]) -> list[Document]:
        """Return the documents for *document_ids*, in the same order.

        All-or-nothing: the first failed lookup is raised and no partial
        list is returned.
        """

    @abstractmethod
    async def store_document(self, document: Document) -> None:
        """Encode *document* and write it under its id, replacing any prior value."""

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources.  Idempotent."""

    @abstractmethod
    def get_descriptor(self) -> BackendDescriptor:
        """Return the descriptor this instance was built with."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"sqlite"``."""
