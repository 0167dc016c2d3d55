"""Unit tests for the OpenAI and fastembed embedder adapters."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ltm.config.settings import Settings
from ltm.models.document import Document
from ltm.utils.errors import EmbeddingError


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_embedding_model": "",
    }
    defaults.update(overrides)
    return Settings(**defaults)


# ======================================================================
# OpenAI Embedder
# ======================================================================


class TestOpenAIEmbedder:
    def test_defaults(self) -> None:
        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        embedder = OpenAIEmbedder(_settings())
        assert embedder.get_dimension() == 1536
        assert embedder.get_provider_name() == "openai_embedding"
        assert embedder.is_available() is True

    def test_compatible_base_url(self) -> None:
        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        embedder = OpenAIEmbedder(
            _settings(
                openai_base_url="http://localhost:11434/v1",
                openai_embedding_model="nomic-embed-text",
            )
        )
        assert embedder.get_dimension() == 768
        assert embedder.get_provider_name() == "openai-compatible_embedding"

    def test_not_available_without_key(self) -> None:
        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        assert OpenAIEmbedder(_settings(openai_api_key="")).is_available() is False

    @pytest.mark.asyncio
    async def test_embed_document(self) -> None:
        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        mock_response = MagicMock()
        mock_response.data = [MagicMock(embedding=[0.5] * 1536)]
        mock_response.usage = MagicMock(total_tokens=7)

        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=mock_response)

        with patch(
            "ltm.providers.embedding.openai_embedder.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            embedder = OpenAIEmbedder(_settings())
            result = await embedder.embed_document(Document(content="hello there"))

        assert len(result) == 1536
        mock_client.embeddings.create.assert_awaited_once_with(
            input=["hello there"], model="text-embedding-3-small"
        )

    @pytest.mark.asyncio
    async def test_api_error(self) -> None:
        import openai

        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(
            side_effect=openai.APIError(message="Rate limit", request=MagicMock(), body=None)
        )

        with patch(
            "ltm.providers.embedding.openai_embedder.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            embedder = OpenAIEmbedder(_settings())
            with pytest.raises(EmbeddingError):
                await embedder.embed_document(Document(content="hello"))

    @pytest.mark.asyncio
    async def test_empty_response(self) -> None:
        from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

        mock_response = MagicMock()
        mock_response.data = []
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=mock_response)

        with patch(
            "ltm.providers.embedding.openai_embedder.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            embedder = OpenAIEmbedder(_settings())
            with pytest.raises(EmbeddingError):
                await embedder.embed_document(Document(content="hello"))


# ======================================================================
# FastEmbed Embedder
# ======================================================================


class TestFastEmbedEmbedder:
    def test_defaults(self) -> None:
        from ltm.providers.embedding.fastembed_embedder import FastEmbedEmbedder

        embedder = FastEmbedEmbedder()
        assert embedder.get_dimension() == 384
        assert embedder.get_provider_name() == "fastembed_bge-small-en-v1.5"

    @pytest.mark.asyncio
    async def test_embed_document_uses_loaded_model(self) -> None:
        from ltm.providers.embedding.fastembed_embedder import FastEmbedEmbedder

        array = MagicMock()
        array.tolist.return_value = [0.25] * 384
        model = MagicMock()
        model.embed.return_value = iter([array])

        embedder = FastEmbedEmbedder()
        embedder._model = model
        result = await embedder.embed_document(Document(content={"note": "structured"}))

        assert result == [0.25] * 384
        model.embed.assert_called_once_with(['{"note": "structured"}'])

    @pytest.mark.asyncio
    async def test_model_failure(self) -> None:
        from ltm.providers.embedding.fastembed_embedder import FastEmbedEmbedder

        model = MagicMock()
        model.embed.side_effect = RuntimeError("onnx exploded")

        embedder = FastEmbedEmbedder()
        embedder._model = model
        with pytest.raises(EmbeddingError):
            await embedder.embed_document(Document(content="hello"))
