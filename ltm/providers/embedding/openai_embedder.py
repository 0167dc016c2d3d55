"""OpenAI-compatible embedder adapter.

Wraps the ``openai`` async client to implement :class:`IEmbedder`.  Works
with OpenAI itself and with OpenAI-compatible services (TogetherAI, Ollama's
``/v1`` endpoint, ...) through ``base_url`` and the model name.
"""

from __future__ import annotations

import openai
import structlog

from ltm.config.settings import Settings
from ltm.interfaces.embedder import IEmbedder
from ltm.models.document import Document
from ltm.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MODEL = "text-embedding-3-small"

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "nomic-embed-text": 768,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
    "intfloat/multilingual-e5-large-instruct": 1024,
}


class OpenAIEmbedder(IEmbedder):
    """Embedder backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-small`` (1536 dims) unless
    ``openai_embedding_model`` is set.  Unknown models default to 768
    dimensions.
    """

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.openai_api_key

        client_kwargs: dict = {"api_key": self._api_key}
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or _DEFAULT_MODEL
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 768)
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )

    # ------------------------------------------------------------------
    # IEmbedder implementation
    # ------------------------------------------------------------------

    async def embed_document(self, document: Document) -> list[float]:
        text = document.embedding_text()
        try:
            response = await self._client.embeddings.create(input=[text], model=self._model)
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.data:
            raise EmbeddingError(
                message=f"{self._provider_label} returned no embedding",
                provider_name=self.get_provider_name(),
            )
        logger.debug(
            "openai_embedding",
            model=self._model,
            document_id=str(document.id),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return list(response.data[0].embedding)

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
