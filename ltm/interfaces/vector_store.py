"""Abstract base class for vector stores.

A vector store indexes document vectors by document id and answers
nearest-neighbour queries with ids only; the documents themselves live in a
:class:`~ltm.interfaces.datasource.IDataSource`.  Implementations may wrap a
local index library (ChromaDB) or a remote service (Pinecone).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from ltm.models.descriptors import BackendDescriptor
from ltm.models.document import Document


# Concrete implementations (ltm/providers/vector_store/):
#   ChromaDBVectorStore  : local persistent index, re-store overwrites
#   PineconeVectorStore  : remote index over REST, re-store overwrites
class IVectorStore(ABC):
    """Contract for vector indexes used by the memory.

    Every operation must be safe to call concurrently with itself and with
    the other operations on the same instance.
    """

    @abstractmethod
    async def store_vector(self, document: Document) -> None:
        """Index ``document.vector`` under ``document.id``.

        ``document.metadata`` is attached as payload where the backend
        supports it.  Whether storing an existing id overwrites or rejects is
        backend-defined and documented on each implementation.

        Raises
        ------
        ltm.utils.errors.DimensionMismatchError
            If the vector length differs from the index dimensionality.
        ltm.utils.errors.WriteCountMismatchError
            If the backend reports writing anything but exactly one record.
        ltm.utils.errors.VectorStoreError
            On any other backend failure, or if the document has no vector.
        """

    @abstractmethod
    async def query_similarity(self, vector: list[float], k: int) -> list[UUID]:
        """Return up to *k* ids ranked by ascending distance to *vector*.

        An empty index yields an empty list, not an error.  An index holding
        fewer than *k* entries yields all of them, ranked.

        Raises
        ------
        ltm.utils.errors.DimensionMismatchError
            If *vector* does not match the index dimensionality.
        ltm.utils.errors.VectorStoreError
            If the query fails.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources.  Idempotent."""

    @abstractmethod
    def get_descriptor(self) -> BackendDescriptor:
        """Return the descriptor this instance was built with."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""
