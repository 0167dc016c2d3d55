"""Abstract base class for embedders.

An embedder turns a :class:`~ltm.models.document.Document` into a vector.
The memory only requires that semantically similar documents land near each
other under the vector store's metric; how the vector is produced is up to
the implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ltm.models.document import Document


# Concrete implementations:
#   OpenAIEmbedder     : OpenAI-compatible embeddings API (requires API key)
#   FastEmbedEmbedder  : local ONNX model via fastembed, no API key
# Located in: ltm/providers/embedding/
class IEmbedder(ABC):
    """Contract for document embedders used by :class:`~ltm.memory.LongTermMemory`."""

    @abstractmethod
    async def embed_document(self, document: Document) -> list[float]:
        """Generate the embedding vector for *document*.

        Parameters
        ----------
        document:
            The document to embed.  Text embedders use
            :meth:`Document.embedding_text`.

        Returns
        -------
        list[float]
            A vector of length :meth:`get_dimension`.

        Raises
        ------
        ltm.utils.errors.EmbeddingError
            If the embedding backend fails.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of produced vectors.

        Constant for the lifetime of the instance; must match the vector
        store the embedder is paired with.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the embedder is configured and usable."""
