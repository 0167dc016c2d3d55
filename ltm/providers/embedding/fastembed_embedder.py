"""Local ONNX-based embedder using fastembed.

Wraps the ``fastembed`` library to implement :class:`IEmbedder` with ONNX
Runtime on CPU, with no API key and no PyTorch.  The model is loaded on first
use and inference runs in a worker thread so the event loop stays free.
"""

from __future__ import annotations

import asyncio

import structlog

from ltm.interfaces.embedder import IEmbedder
from ltm.models.document import Document
from ltm.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

# Known model dimensions for fastembed-supported models.
_MODEL_DIMENSIONS: dict[str, int] = {
    "BAAI/bge-small-en-v1.5": 384,
    "BAAI/bge-base-en-v1.5": 768,
    "sentence-transformers/all-MiniLM-L6-v2": 384,
    "intfloat/multilingual-e5-large": 1024,
}

_DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"


class FastEmbedEmbedder(IEmbedder):
    """Embedder backed by fastembed (ONNX Runtime), lazily initialised."""

    def __init__(self, model_name: str | None = None) -> None:
        self._model_name = model_name or _DEFAULT_MODEL
        self._dimension = _MODEL_DIMENSIONS.get(self._model_name, 384)
        self._model = None

    def _load_model(self) -> None:
        if self._model is not None:
            return
        try:
            from fastembed import TextEmbedding

            logger.info("loading_fastembed_model", model=self._model_name)
            self._model = TextEmbedding(model_name=self._model_name)
        except Exception as exc:
            raise EmbeddingError(
                message=f"Failed to load fastembed model '{self._model_name}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def _embed_sync(self, text: str) -> list[float]:
        self._load_model()
        try:
            # fastembed yields numpy arrays
            vectors = list(self._model.embed([text]))
        except Exception as exc:
            raise EmbeddingError(
                message=f"Fastembed embedding error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return vectors[0].tolist()

    async def embed_document(self, document: Document) -> list[float]:
        return await asyncio.to_thread(self._embed_sync, document.embedding_text())

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return f"fastembed_{self._model_name.split('/')[-1]}"

    def is_available(self) -> bool:
        """Return ``True`` if fastembed is installed."""
        try:
            import fastembed  # noqa: F401

            return True
        except ImportError:
            return False
