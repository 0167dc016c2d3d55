"""The Document model shared by every component of the memory.

A :class:`Document` is the unit of stored knowledge: an identifier, the
embedding vector (absent until the embedder ran), free-form metadata and the
original content.  The identifier is the only link between a vector store
entry and the full document kept by a data source.

The model is frozen.  Attaching a vector produces a new instance through
:meth:`Document.with_vector`, so the id never changes after creation.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ltm.utils.errors import DocumentEncodingError


class Document(BaseModel):
    """A piece of content with its embedding and metadata.

    The JSON encoding produced by :meth:`to_json` is the wire shape written
    by data sources::

        {"id": "<uuid>", "vector": [0.1, ...], "metadata": {...}, "content": ...}
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier, the join key between vector store and data source.",
    )
    vector: list[float] | None = Field(
        default=None,
        description="Embedding vector; None until the document has been embedded.",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque metadata passed verbatim to both backends.",
    )
    content: Any = Field(
        default=None,
        description="Original payload the vector is derived from.",
    )

    def with_vector(self, vector: list[float]) -> Document:
        """Return a copy of this document carrying *vector*."""
        return self.model_copy(update={"vector": list(vector)})

    def embedding_text(self) -> str:
        """Return the text a text embedder should see for this document."""
        if isinstance(self.content, str):
            return self.content
        if self.content is None:
            return ""
        try:
            return json.dumps(self.content, sort_keys=True, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise DocumentEncodingError(
                message=f"Content of document {self.id} is not JSON-serialisable: {exc}",
            ) from exc

    def to_json(self) -> bytes:
        """Encode the document, vector and metadata included, as UTF-8 JSON."""
        try:
            return self.model_dump_json().encode("utf-8")
        except (TypeError, ValueError) as exc:
            # pydantic raises PydanticSerializationError (a ValueError) for
            # metadata or content it cannot encode.
            raise DocumentEncodingError(
                message=f"Cannot encode document {self.id}: {exc}",
            ) from exc

    @classmethod
    def from_json(cls, raw: bytes | str) -> Document:
        """Decode a document written by :meth:`to_json`."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise DocumentEncodingError(
                message=f"Cannot decode document: {exc.error_count()} validation error(s): {exc}",
            ) from exc
