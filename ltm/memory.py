"""Long-term memory orchestrator.

Composes one embedder, one vector store and one data source into two
pipelines:

    store:     embed → vector_store.store_vector → datasource.store_document
    retrieve:  embed → vector_store.query_similarity → datasource.get_documents

Each pipeline awaits its collaborators strictly in sequence; there is no
fan-out and no shared mutable state on the orchestrator, so concurrent
callers are as safe as the backends they share.

CONSISTENCY NOTE:
    The two stores are written without a transaction.  The vector goes in
    first so a query can never return an id whose vector does not exist.
    If the document write then fails, the index keeps a dangling id and a
    later retrieval that ranks it will fail in the fetch stage with
    :class:`DocumentNotFoundError`.  Nothing is rolled back or retried.

Every collaborator failure is re-raised with the failing
:class:`PipelineStage` attached.  Errors that are already part of the
:class:`LTMError` hierarchy keep their class (so ``except
DocumentNotFoundError`` still works); anything else is wrapped in the
stage's error class.  The original exception is always chained.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from ltm.interfaces.datasource import IDataSource
from ltm.interfaces.embedder import IEmbedder
from ltm.interfaces.vector_store import IVectorStore
from ltm.models.descriptors import MemoryDescriptor
from ltm.models.document import Document
from ltm.providers.registry import build_backend
from ltm.utils.errors import (
    DataSourceError,
    EmbeddingError,
    LTMError,
    PipelineStage,
    VectorStoreError,
)
from ltm.utils.logging import get_logger

DEFAULT_TOP_K = 10

T = TypeVar("T")

# Error class used when a collaborator raises something outside LTMError.
_STAGE_ERRORS: dict[PipelineStage, type[LTMError]] = {
    PipelineStage.EMBED: EmbeddingError,
    PipelineStage.STORE_VECTOR: VectorStoreError,
    PipelineStage.QUERY_VECTOR: VectorStoreError,
    PipelineStage.STORE_DOCUMENT: DataSourceError,
    PipelineStage.FETCH_DOCUMENTS: DataSourceError,
}


class LongTermMemory:
    """Long-term memory for a conversational agent.

    All collaborators are injected; the memory owns them from then on and
    closes them in :meth:`close`.

    Parameters
    ----------
    embedder:
        Turns documents into vectors.
    vector_store:
        Indexes vectors and answers similarity queries with ids.
    datasource:
        Persists whole documents by id.
    default_top_k:
        Result count used when :meth:`retrieve_similar_documents` is called
        with ``top_k=0``.
    """

    def __init__(
        self,
        embedder: IEmbedder,
        vector_store: IVectorStore,
        datasource: IDataSource,
        default_top_k: int = DEFAULT_TOP_K,
    ) -> None:
        self._embedder = embedder
        self._vector_store = vector_store
        self._datasource = datasource
        self._default_top_k = default_top_k
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @classmethod
    def from_descriptor(
        cls,
        descriptor: MemoryDescriptor,
        embedder: IEmbedder,
        default_top_k: int = DEFAULT_TOP_K,
    ) -> LongTermMemory:
        """Rebuild a memory from the descriptor of a previous instance.

        Embedders are not described; the caller supplies one compatible with
        the vectors already stored.
        """
        return cls(
            embedder=embedder,
            vector_store=build_backend(descriptor.vector_store),
            datasource=build_backend(descriptor.datasource),
            default_top_k=default_top_k,
        )

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    async def store_document(self, document: Document) -> Document:
        """Embed *document* and write it to the vector store, then the data source.

        Returns
        -------
        Document
            The stored document, carrying its embedding.

        Raises
        ------
        EmbeddingError
            Embedding failed; nothing was written.
        VectorStoreError
            The vector write failed; the document was not written.
        DataSourceError
            The document write failed after the vector was indexed.
        """
        log = self._logger.bind(document_id=str(document.id))

        vector = await self._run(PipelineStage.EMBED, self._embedder.embed_document, document)
        if not vector:
            raise self._stage_failed(
                PipelineStage.EMBED,
                EmbeddingError(
                    message=f"Embedder returned an empty vector for document {document.id}",
                    provider_name=self._embedder.get_provider_name(),
                ),
            )
        embedded = document.with_vector(vector)

        await self._run(PipelineStage.STORE_VECTOR, self._vector_store.store_vector, embedded)
        await self._run(PipelineStage.STORE_DOCUMENT, self._datasource.store_document, embedded)

        log.info("ltm_document_stored", dimensions=len(vector))
        return embedded

    async def retrieve_similar_documents(
        self, document: Document, top_k: int = 0
    ) -> list[Document]:
        """Return the stored documents most similar to *document*, best first.

        ``top_k == 0`` means the default (10 unless configured otherwise).
        Negative values raise :class:`ValueError`.  Values larger than the
        index are passed through; the vector store returns what it holds.
        An empty index yields ``[]``.
        """
        if top_k < 0:
            raise ValueError(f"top_k must be zero or positive, got {top_k}")
        if top_k == 0:
            top_k = self._default_top_k

        vector = await self._run(PipelineStage.EMBED, self._embedder.embed_document, document)
        ids = await self._run(
            PipelineStage.QUERY_VECTOR, self._vector_store.query_similarity, vector, top_k
        )
        if not ids:
            self._logger.info("ltm_retrieve_empty", top_k=top_k)
            return []

        documents = await self._run(
            PipelineStage.FETCH_DOCUMENTS, self._datasource.get_documents, ids
        )
        self._logger.info("ltm_documents_retrieved", top_k=top_k, results_count=len(documents))
        return documents

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the vector store and the data source.

        Both closes are attempted; the first failure is raised afterwards.
        """
        first_error: BaseException | None = None
        for backend in (self._vector_store, self._datasource):
            try:
                await backend.close()
            except Exception as exc:
                self._logger.error(
                    "ltm_backend_close_failed",
                    provider=backend.get_provider_name(),
                    error=str(exc),
                )
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    async def __aenter__(self) -> LongTermMemory:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def get_descriptor(self) -> MemoryDescriptor:
        """Describe both storage backends so the memory can be rebuilt."""
        return MemoryDescriptor(
            vector_store=self._vector_store.get_descriptor(),
            datasource=self._datasource.get_descriptor(),
        )

    @property
    def embedder(self) -> IEmbedder:
        return self._embedder

    @property
    def vector_store(self) -> IVectorStore:
        return self._vector_store

    @property
    def datasource(self) -> IDataSource:
        return self._datasource

    # ------------------------------------------------------------------
    # Error attribution
    # ------------------------------------------------------------------

    async def _run(
        self, stage: PipelineStage, call: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        """Await ``call(*args)``, tagging any failure with *stage*."""
        try:
            return await call(*args)
        except LTMError as exc:
            raise self._stage_failed(stage, exc) from exc
        except Exception as exc:
            wrapped = _STAGE_ERRORS[stage](message=f"{stage.value} failed: {exc}")
            raise self._stage_failed(stage, wrapped) from exc

    def _stage_failed(self, stage: PipelineStage, error: LTMError) -> LTMError:
        self._logger.error(
            "ltm_stage_failed",
            stage=stage.value,
            error_type=type(error).__name__,
            provider=error.provider_name,
            error=error.message,
        )
        return error.at_stage(stage)
