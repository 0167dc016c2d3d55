"""ChromaDB vector store adapter.

Wraps ``chromadb.PersistentClient`` to implement :class:`IVectorStore` over
one collection with a fixed dimensionality and distance metric.  Fully
local; no external service required.

Re-store policy: **overwrite**.  Storing an id again deletes the old record
and writes the new one, so both its vector and its metadata are replaced.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from uuid import UUID

# chromadb reads this before its telemetry client is created.
os.environ.setdefault("ANONYMIZED_TELEMETRY", "False")

import chromadb
import structlog

from ltm.interfaces.vector_store import IVectorStore
from ltm.models.descriptors import ChromaDBDescriptor, DistanceMetric
from ltm.models.document import Document
from ltm.providers.registry import register_backend
from ltm.providers.vector_store._metadata import flatten_metadata
from ltm.utils.errors import (
    ConfigurationError,
    DimensionMismatchError,
    VectorStoreError,
)
from ltm.utils.paths import memory_subfolder

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "chromadb"
_DEFAULT_COLLECTION = "ltm"


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that keeps ChromaDB from loading its default model.

    Vectors always arrive pre-computed from an :class:`IEmbedder`, so this is
    never called.  The config methods let ChromaDB persist and rebuild it
    with the collection.
    """

    def __init__(self) -> None:
        pass

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError("ltm stores pre-computed embeddings only")

    @staticmethod
    def name() -> str:
        return "noop_precomputed"

    def get_config(self) -> dict[str, Any]:
        return {}

    @staticmethod
    def build_from_config(config: dict[str, Any]) -> _NoopEmbeddingFunction:
        return _NoopEmbeddingFunction()


@register_backend("chromadb")
class ChromaDBVectorStore(IVectorStore):
    """Vector store backed by a persistent ChromaDB collection.

    Parameters
    ----------
    dimensions:
        Vector dimensionality of the collection; must be greater than zero.
    path:
        Persistence directory.  Empty means ``<memory home>/chromadb``.
    collection:
        Collection name, ``"ltm"`` by default.
    space:
        Distance metric used by the HNSW index.
    """

    def __init__(
        self,
        dimensions: int,
        path: str | Path = "",
        collection: str = _DEFAULT_COLLECTION,
        space: DistanceMetric | str = DistanceMetric.COSINE,
        memory_home_dir: str | Path | None = None,
    ) -> None:
        if dimensions <= 0:
            raise ConfigurationError(
                message=f"dimensions must be greater than 0, got {dimensions}",
                provider_name=_PROVIDER_NAME,
            )
        try:
            space = DistanceMetric(space)
        except ValueError as exc:
            raise ConfigurationError(
                message=f"Unsupported distance metric '{space}'",
                provider_name=_PROVIDER_NAME,
            ) from exc
        if not collection:
            collection = _DEFAULT_COLLECTION
        if not path:
            path = memory_subfolder("chromadb", memory_home_dir)

        self._dimensions = dimensions
        self._path = str(Path(path).expanduser())
        self._collection_name = collection
        self._space = space

        try:
            self._client = chromadb.PersistentClient(
                path=self._path,
                settings=chromadb.config.Settings(anonymized_telemetry=False),
            )
            self._collection = self._open_collection(collection, space)
        except Exception as exc:
            raise ConfigurationError(
                message=f"Cannot open ChromaDB collection '{collection}' at {self._path}: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        self._validate_stored_dimensions()

        self._descriptor = ChromaDBDescriptor(
            path=self._path,
            collection=collection,
            dimensions=dimensions,
            space=space,
        )
        self._closed = False
        logger.info(
            "chromadb_store_opened",
            path=self._path,
            collection=collection,
            dimensions=dimensions,
            space=space.value,
        )

    @classmethod
    def from_descriptor(cls, descriptor: ChromaDBDescriptor) -> ChromaDBVectorStore:
        return cls(
            dimensions=descriptor.dimensions,
            path=descriptor.path,
            collection=descriptor.collection,
            space=descriptor.space,
        )

    # ------------------------------------------------------------------
    # IVectorStore implementation
    # ------------------------------------------------------------------

    async def store_vector(self, document: Document) -> None:
        self._ensure_open()
        if document.vector is None:
            raise VectorStoreError(
                message=f"Document {document.id} has no vector",
                provider_name=_PROVIDER_NAME,
            )
        self._check_dimensions(document.vector)

        record_id = str(document.id)
        kwargs: dict[str, Any] = {
            "ids": [record_id],
            "embeddings": [document.vector],
        }
        metadata = flatten_metadata(document.metadata)
        if metadata:
            kwargs["metadatas"] = [metadata]

        # upsert merges metadata keys, so the old record is dropped first.
        try:
            self._collection.delete(ids=[record_id])
            self._collection.add(**kwargs)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB write of {document.id} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        logger.debug("chromadb_vector_stored", document_id=record_id)

    async def query_similarity(self, vector: list[float], k: int) -> list[UUID]:
        """Query the collection for the *k* nearest ids.

        ``n_results`` is clamped to the collection size; an empty collection
        short-circuits to ``[]``.
        """
        self._ensure_open()
        self._check_dimensions(vector)
        try:
            count = self._collection.count()
            if count == 0 or k <= 0:
                return []
            results = self._collection.query(
                query_embeddings=[vector],
                n_results=min(k, count),
                include=["distances"],
            )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        raw_ids = results["ids"][0] if results["ids"] else []
        try:
            ids = [UUID(raw_id) for raw_id in raw_ids]
        except ValueError as exc:
            raise VectorStoreError(
                message=f"ChromaDB returned a non-UUID id: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        logger.info(
            "chromadb_query",
            collection=self._collection_name,
            requested=k,
            results_count=len(ids),
        )
        return ids

    async def close(self) -> None:
        """Drop the client; ChromaDB flushes on every write."""
        if self._closed:
            return
        self._closed = True
        self._collection = None
        self._client = None
        logger.debug("chromadb_store_closed", path=self._path)

    def get_descriptor(self) -> ChromaDBDescriptor:
        return self._descriptor

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def count(self) -> int:
        """Return the number of vectors in the collection."""
        self._ensure_open()
        return self._collection.count()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _open_collection(self, name: str, space: DistanceMetric):
        metadata = {"hnsw:space": space.value}
        try:
            return self._client.get_or_create_collection(
                name=name,
                metadata=metadata,
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            # Collection persisted with another embedding function; vectors
            # are pre-computed, so reopen it with whatever was stored.
            return self._client.get_or_create_collection(name=name, metadata=metadata)

    def _validate_stored_dimensions(self) -> None:
        """Compare one stored vector against the configured dimensionality.

        A reopened collection keeps the dimensionality it was created with,
        so a mismatch here would fail every later write and query.
        """
        try:
            if self._collection.count() == 0:
                return
            sample = self._collection.peek(limit=1)
        except Exception as exc:
            logger.warning("chromadb_dimension_check_skipped", error=str(exc))
            return

        embeddings = sample.get("embeddings") if sample else None
        if embeddings is None or len(embeddings) == 0:
            return
        stored_dim = len(embeddings[0])
        if stored_dim != self._dimensions:
            logger.error(
                "chromadb_dimension_mismatch",
                collection=self._collection_name,
                stored_dim=stored_dim,
                expected_dim=self._dimensions,
            )
            raise ConfigurationError(
                message=(
                    f"Collection '{self._collection_name}' at {self._path} holds "
                    f"{stored_dim}-dim vectors, not {self._dimensions}"
                ),
                provider_name=_PROVIDER_NAME,
            )

    def _ensure_open(self) -> None:
        if self._closed:
            raise VectorStoreError(
                message=f"ChromaDB store '{self._collection_name}' is closed",
                provider_name=_PROVIDER_NAME,
            )

    def _check_dimensions(self, vector: list[float]) -> None:
        if len(vector) != self._dimensions:
            raise DimensionMismatchError(
                message=(
                    f"Vector has {len(vector)} dimensions but collection "
                    f"'{self._collection_name}' expects {self._dimensions}"
                ),
                provider_name=_PROVIDER_NAME,
            )
