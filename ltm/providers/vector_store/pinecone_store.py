"""Pinecone vector store adapter over the Pinecone REST API.

Talks to one index (``https://{index}-{project}.svc.{environment}.pinecone.io``)
and keeps all vectors of this store in one namespace.  Uses an injected
``httpx.AsyncClient`` for testability and connection pooling; when none is
given the store creates and owns its own client.

Re-store policy: **overwrite**.  Pinecone upserts replace an existing id.
Every single-document upsert must report ``upsertedCount == 1``; any other
count is raised as :class:`WriteCountMismatchError`.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import httpx
import structlog

from ltm.interfaces.vector_store import IVectorStore
from ltm.models.descriptors import PineconeDescriptor
from ltm.models.document import Document
from ltm.providers.registry import register_backend
from ltm.providers.vector_store._metadata import flatten_metadata
from ltm.utils.errors import (
    ConfigurationError,
    DimensionMismatchError,
    VectorStoreError,
    WriteCountMismatchError,
)
from ltm.utils.paths import generate_name

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "pinecone"
_DEFAULT_TIMEOUT = 30.0


@register_backend("pinecone")
class PineconeVectorStore(IVectorStore):
    """Vector store backed by a Pinecone index namespace.

    Parameters
    ----------
    api_key, index_name, project_name, environment:
        Identify and authenticate against the index.  All are required.
    namespace:
        Namespace holding this store's vectors.  Empty means a random
        10-character namespace, recorded in the descriptor.
    http_client:
        Optional shared client.  The store never closes a client it did
        not create.
    timeout:
        Request timeout in seconds for an owned client.
    """

    def __init__(
        self,
        api_key: str,
        index_name: str,
        project_name: str,
        environment: str,
        namespace: str = "",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        missing = [
            name
            for name, value in (
                ("api_key", api_key),
                ("index_name", index_name),
                ("project_name", project_name),
                ("environment", environment),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                message=f"Pinecone store is missing: {', '.join(missing)}",
                provider_name=_PROVIDER_NAME,
            )

        self._namespace = namespace or generate_name(10)
        self._base_url = f"https://{index_name}-{project_name}.svc.{environment}.pinecone.io"
        self._headers = {
            "Api-Key": api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._closed = False
        self._descriptor = PineconeDescriptor(
            api_key=api_key,
            index_name=index_name,
            project_name=project_name,
            environment=environment,
            namespace=self._namespace,
        )

    @classmethod
    def from_descriptor(cls, descriptor: PineconeDescriptor) -> PineconeVectorStore:
        return cls(
            api_key=descriptor.api_key,
            index_name=descriptor.index_name,
            project_name=descriptor.project_name,
            environment=descriptor.environment,
            namespace=descriptor.namespace,
        )

    @property
    def namespace(self) -> str:
        return self._namespace

    # ------------------------------------------------------------------
    # IVectorStore implementation
    # ------------------------------------------------------------------

    async def store_vector(self, document: Document) -> None:
        if document.vector is None:
            raise VectorStoreError(
                message=f"Document {document.id} has no vector",
                provider_name=_PROVIDER_NAME,
            )
        vector: dict[str, Any] = {"id": str(document.id), "values": document.vector}
        metadata = flatten_metadata(document.metadata)
        if metadata:
            vector["metadata"] = metadata

        data = await self._post(
            "/vectors/upsert",
            {"vectors": [vector], "namespace": self._namespace},
        )
        upserted = data.get("upsertedCount", 0)
        if upserted != 1:
            logger.error(
                "pinecone_upsert_count_mismatch",
                document_id=str(document.id),
                upserted_count=upserted,
            )
            raise WriteCountMismatchError(
                message=f"Upserted count is {upserted}, expected 1 for document {document.id}",
                provider_name=_PROVIDER_NAME,
            )
        logger.debug("pinecone_vector_stored", document_id=str(document.id))

    async def query_similarity(self, vector: list[float], k: int) -> list[UUID]:
        if k <= 0:
            return []
        data = await self._post(
            "/query",
            {
                "vector": vector,
                "topK": k,
                "namespace": self._namespace,
                "includeValues": False,
                "includeMetadata": False,
            },
        )
        matches = data.get("matches") or []
        try:
            ids = [UUID(match["id"]) for match in matches]
        except (KeyError, TypeError, ValueError) as exc:
            raise VectorStoreError(
                message=f"Pinecone returned a malformed match: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        logger.info(
            "pinecone_query",
            namespace=self._namespace,
            requested=k,
            results_count=len(ids),
        )
        return ids

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            await self._http.aclose()

    def get_descriptor(self) -> PineconeDescriptor:
        return self._descriptor

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST *payload* to the index and return the decoded JSON body."""
        if self._closed:
            raise VectorStoreError(
                message="Pinecone store is closed",
                provider_name=_PROVIDER_NAME,
            )
        try:
            response = await self._http.post(
                f"{self._base_url}{path}",
                json=payload,
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise VectorStoreError(
                message=f"Pinecone request to {path} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if response.status_code in (401, 403):
            raise VectorStoreError(
                message=f"Pinecone authentication failed ({response.status_code})",
                provider_name=_PROVIDER_NAME,
            )
        if response.status_code == 400 and "dimension" in response.text.lower():
            raise DimensionMismatchError(
                message=f"Pinecone rejected vector dimensions: {response.text}",
                provider_name=_PROVIDER_NAME,
            )
        if response.status_code >= 400:
            raise VectorStoreError(
                message=f"Pinecone {path} returned {response.status_code}: {response.text}",
                provider_name=_PROVIDER_NAME,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise VectorStoreError(
                message=f"Pinecone {path} returned invalid JSON: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        if not isinstance(data, dict):
            raise VectorStoreError(
                message=f"Pinecone {path} returned {type(data).__name__}, expected a JSON object",
                provider_name=_PROVIDER_NAME,
            )
        return data
