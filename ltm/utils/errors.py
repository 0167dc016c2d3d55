"""Custom exception hierarchy for the long-term memory package.

All package exceptions inherit from :class:`LTMError`, which carries an
optional ``provider_name`` (the backend that failed, e.g. ``"chromadb"``,
``"sqlite"``) and an optional :class:`PipelineStage` set by the
orchestrator so callers can tell a missing vector from a missing document.

    LTMError  (base -- catch-all for any ltm error)
    +-- ConfigurationError        (construction / invalid configuration)
    +-- DocumentEncodingError     (Document (de)serialisation)
    +-- EmbeddingError            (embedder failure)
    +-- VectorStoreError          (vector backend failure)
    |   +-- DimensionMismatchError
    |   +-- WriteCountMismatchError
    +-- DataSourceError           (document backend failure)
        +-- DocumentNotFoundError
"""

from __future__ import annotations

from enum import Enum


class PipelineStage(str, Enum):
    """Orchestrator step in which a collaborator failed."""

    EMBED = "embed"
    STORE_VECTOR = "store_vector"
    STORE_DOCUMENT = "store_document"
    QUERY_VECTOR = "query_vector"
    FETCH_DOCUMENTS = "fetch_documents"


class LTMError(Exception):
    """Base exception for all ltm errors.

    ``__str__`` prefixes the provider name in brackets for log scanning,
    e.g. ``[pinecone] upserted count is 0, expected 1``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        self._stage = stage
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    @property
    def stage(self) -> PipelineStage | None:
        return self._stage

    def at_stage(self, stage: PipelineStage) -> LTMError:
        """Return a copy of this error, same class, tagged with *stage*."""
        return type(self)(
            message=self._message,
            provider_name=self._provider_name,
            stage=stage,
        )

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Construction / encoding errors
# ---------------------------------------------------------------------------

class ConfigurationError(LTMError):
    """Raised when a backend is constructed with invalid configuration."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class DocumentEncodingError(LTMError):
    """Raised when a Document cannot be serialised or deserialised."""

    def __init__(
        self,
        message: str = "Document encoding failed",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


# ---------------------------------------------------------------------------
# Backend errors
# ---------------------------------------------------------------------------

class EmbeddingError(LTMError):
    """Raised when an embedder fails to produce a vector."""

    def __init__(
        self,
        message: str = "Embedding failed",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class VectorStoreError(LTMError):
    """Raised when a vector store write or query fails."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class DimensionMismatchError(VectorStoreError):
    """Raised when a vector's length differs from the index dimensionality."""

    def __init__(
        self,
        message: str = "Vector dimensionality does not match the index",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class WriteCountMismatchError(VectorStoreError):
    """Raised when a single-document write reports anything but one record.

    Signals silent data loss (zero records) or duplication (more than one),
    so it is never downgraded to a warning.
    """

    def __init__(
        self,
        message: str = "Backend reported an unexpected write count",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class DataSourceError(LTMError):
    """Raised when a document store read or write fails."""

    def __init__(
        self,
        message: str = "Data source operation failed",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)


class DocumentNotFoundError(DataSourceError):
    """Raised when no document is stored under the requested id."""

    def __init__(
        self,
        message: str = "Document not found",
        provider_name: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, stage=stage)
