"""Unit tests for the Pinecone vector store, with HTTP served by httpx.MockTransport."""

from __future__ import annotations

import json
from uuid import uuid4

import httpx
import pytest

from ltm.models.descriptors import PineconeDescriptor
from ltm.models.document import Document
from ltm.providers.registry import build_backend
from ltm.providers.vector_store.pinecone_store import PineconeVectorStore
from ltm.utils.errors import (
    ConfigurationError,
    DimensionMismatchError,
    VectorStoreError,
    WriteCountMismatchError,
)

_CREDENTIALS = {
    "api_key": "pc-test-key",
    "index_name": "memories",
    "project_name": "abc123",
    "environment": "us-west1-gcp",
}


def _store(handler, namespace: str = "agent") -> tuple[PineconeVectorStore, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    store = PineconeVectorStore(**_CREDENTIALS, namespace=namespace, http_client=client)
    return store, requests


def _doc(**metadata) -> Document:
    return Document(content="hello", metadata=metadata).with_vector([0.1, 0.2])


class TestConstruction:
    @pytest.mark.parametrize("missing", list(_CREDENTIALS))
    def test_missing_credentials(self, missing: str) -> None:
        kwargs = dict(_CREDENTIALS, **{missing: ""})
        with pytest.raises(ConfigurationError):
            PineconeVectorStore(**kwargs)

    def test_generated_namespace(self) -> None:
        store = PineconeVectorStore(**_CREDENTIALS)
        assert len(store.namespace) == 10
        assert store.get_descriptor().namespace == store.namespace

    def test_descriptor(self) -> None:
        store = PineconeVectorStore(**_CREDENTIALS, namespace="agent")
        assert store.get_descriptor() == PineconeDescriptor(**_CREDENTIALS, namespace="agent")
        assert store.get_provider_name() == "pinecone"

    @pytest.mark.asyncio
    async def test_rebuilt_from_descriptor(self) -> None:
        store = PineconeVectorStore(**_CREDENTIALS, namespace="agent")
        rebuilt = build_backend(store.get_descriptor())
        assert isinstance(rebuilt, PineconeVectorStore)
        assert rebuilt.get_descriptor() == store.get_descriptor()
        await store.close()
        await rebuilt.close()


class TestStoreVector:
    @pytest.mark.asyncio
    async def test_upsert_request(self) -> None:
        store, requests = _store(lambda r: httpx.Response(200, json={"upsertedCount": 1}))
        doc = _doc(speaker="user", tags=["a"])

        await store.store_vector(doc)

        request = requests[0]
        assert request.url == "https://memories-abc123.svc.us-west1-gcp.pinecone.io/vectors/upsert"
        assert request.headers["Api-Key"] == "pc-test-key"
        body = json.loads(request.content)
        assert body["namespace"] == "agent"
        assert body["vectors"] == [
            {
                "id": str(doc.id),
                "values": [0.1, 0.2],
                "metadata": {"speaker": "user", "tags": '["a"]'},
            }
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 2])
    async def test_write_count_mismatch(self, count: int) -> None:
        store, _ = _store(lambda r: httpx.Response(200, json={"upsertedCount": count}))
        with pytest.raises(WriteCountMismatchError):
            await store.store_vector(_doc())

    @pytest.mark.asyncio
    async def test_auth_failure(self) -> None:
        store, _ = _store(lambda r: httpx.Response(401, text="unauthorized"))
        with pytest.raises(VectorStoreError, match="authentication"):
            await store.store_vector(_doc())

    @pytest.mark.asyncio
    async def test_dimension_rejected(self) -> None:
        store, _ = _store(
            lambda r: httpx.Response(
                400, text="Vector dimension 2 does not match the dimension of the index 1536"
            )
        )
        with pytest.raises(DimensionMismatchError):
            await store.store_vector(_doc())

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        store, _ = _store(handler)
        with pytest.raises(VectorStoreError):
            await store.store_vector(_doc())

    @pytest.mark.asyncio
    async def test_document_without_vector(self) -> None:
        store, requests = _store(lambda r: httpx.Response(200, json={"upsertedCount": 1}))
        with pytest.raises(VectorStoreError):
            await store.store_vector(Document(content="no vector"))
        assert requests == []


class TestQuerySimilarity:
    @pytest.mark.asyncio
    async def test_returns_ids_in_rank_order(self) -> None:
        first, second = uuid4(), uuid4()
        store, requests = _store(
            lambda r: httpx.Response(
                200,
                json={
                    "matches": [
                        {"id": str(first), "score": 0.99},
                        {"id": str(second), "score": 0.5},
                    ],
                    "namespace": "agent",
                },
            )
        )

        assert await store.query_similarity([0.1, 0.2], 2) == [first, second]
        body = json.loads(requests[0].content)
        assert body["topK"] == 2
        assert body["namespace"] == "agent"

    @pytest.mark.asyncio
    async def test_no_matches_is_empty(self) -> None:
        store, _ = _store(lambda r: httpx.Response(200, json={"matches": []}))
        assert await store.query_similarity([0.1, 0.2], 5) == []

    @pytest.mark.asyncio
    async def test_malformed_id(self) -> None:
        store, _ = _store(lambda r: httpx.Response(200, json={"matches": [{"id": "nope"}]}))
        with pytest.raises(VectorStoreError):
            await store.query_similarity([0.1, 0.2], 1)

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        store, _ = _store(lambda r: httpx.Response(503, text="unavailable"))
        with pytest.raises(VectorStoreError):
            await store.query_similarity([0.1, 0.2], 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[], None, "ok", 1])
    async def test_non_object_body(self, body) -> None:
        raw = json.dumps(body).encode()
        store, _ = _store(lambda r: httpx.Response(200, content=raw))
        with pytest.raises(VectorStoreError, match="expected a JSON object"):
            await store.query_similarity([0.1, 0.2], 1)
        with pytest.raises(VectorStoreError, match="expected a JSON object"):
            await store.store_vector(_doc())

    @pytest.mark.asyncio
    async def test_invalid_json_body(self) -> None:
        store, _ = _store(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(VectorStoreError, match="invalid JSON"):
            await store.query_similarity([0.1, 0.2], 1)


class TestClose:
    @pytest.mark.asyncio
    async def test_injected_client_left_open(self) -> None:
        store, _ = _store(lambda r: httpx.Response(200, json={"matches": []}))
        await store.close()
        await store.close()
        assert store._http.is_closed is False
        with pytest.raises(VectorStoreError):
            await store.query_similarity([0.1, 0.2], 1)

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        store = PineconeVectorStore(**_CREDENTIALS)
        await store.close()
        assert store._http.is_closed is True
