"""Test doubles shared across the ltm test suite."""

from __future__ import annotations

import hashlib
import math

from ltm.interfaces.embedder import IEmbedder
from ltm.models.document import Document

DIMENSIONS = 32


class HashingEmbedder(IEmbedder):
    """Deterministic bag-of-words embedder.

    Each lowercase token bumps one hashed bucket; the result is L2
    normalised, so identical texts map to identical vectors and texts with
    disjoint vocabularies land far apart under cosine distance.
    """

    def __init__(self, dimension: int = DIMENSIONS) -> None:
        self._dimension = dimension

    async def embed_document(self, document: Document) -> list[float]:
        vector = [0.0] * self._dimension
        for token in document.embedding_text().lower().split():
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            vector[int.from_bytes(digest[:4], "big") % self._dimension] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "hashing_test"

    def is_available(self) -> bool:
        return True
