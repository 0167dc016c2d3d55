"""Embedder implementations.

    OpenAIEmbedder    : OpenAI-compatible embeddings API (1536 dims by default).
    FastEmbedEmbedder : local ONNX model via fastembed (384 dims by default).

FastEmbedEmbedder imports fastembed lazily, so it is safe to re-export even
where fastembed is not installed.
"""

from ltm.providers.embedding.fastembed_embedder import FastEmbedEmbedder
from ltm.providers.embedding.openai_embedder import OpenAIEmbedder

__all__ = ["FastEmbedEmbedder", "OpenAIEmbedder"]
