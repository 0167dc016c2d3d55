"""Backend Descriptors: serialisable snapshots of backend configuration.

Each backend records the configuration it was *actually* built with
(generated default paths and namespaces included) in a frozen descriptor.
A descriptor can be dumped to JSON, stored anywhere, loaded back and handed
to :func:`ltm.providers.registry.build_backend` to obtain an equivalent live
backend pointing at the same data with the same credentials.

Descriptors form a tagged union on the ``kind`` field; adding a backend
means adding a variant here and registering a factory for its kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ltm.utils.errors import ConfigurationError


class DistanceMetric(str, Enum):
    """Similarity metric of a local vector index (ChromaDB ``hnsw:space``)."""

    COSINE = "cosine"
    L2 = "l2"
    INNER_PRODUCT = "ip"


class SQLiteDescriptor(BaseModel):
    """Embedded key/value DataSource stored in one SQLite file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["sqlite"] = "sqlite"
    path: str = Field(description="Filesystem path of the SQLite database.")


class ChromaDBDescriptor(BaseModel):
    """Local vector index persisted by ChromaDB."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["chromadb"] = "chromadb"
    path: str = Field(description="Directory holding the ChromaDB persistent client.")
    collection: str = Field(description="Collection name inside the client.")
    dimensions: int = Field(gt=0, description="Vector dimensionality of the collection.")
    space: DistanceMetric = Field(default=DistanceMetric.COSINE)


class PineconeDescriptor(BaseModel):
    """Remote Pinecone index (one namespace of it)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pinecone"] = "pinecone"
    api_key: str
    index_name: str
    project_name: str
    environment: str
    namespace: str


BackendDescriptor = Annotated[
    Union[SQLiteDescriptor, ChromaDBDescriptor, PineconeDescriptor],
    Field(discriminator="kind"),
]

_DESCRIPTOR_ADAPTER: TypeAdapter[BackendDescriptor] = TypeAdapter(BackendDescriptor)


class MemoryDescriptor(BaseModel):
    """Descriptors of both storage backends of one long-term memory."""

    model_config = ConfigDict(frozen=True)

    vector_store: BackendDescriptor
    datasource: BackendDescriptor


def dump_descriptor(descriptor: BackendDescriptor | MemoryDescriptor) -> str:
    """Serialise any descriptor to a JSON string."""
    if isinstance(descriptor, MemoryDescriptor):
        return descriptor.model_dump_json()
    return _DESCRIPTOR_ADAPTER.dump_json(descriptor).decode("utf-8")


def load_descriptor(raw: str | bytes) -> BackendDescriptor:
    """Parse a JSON backend descriptor, picking the variant from ``kind``."""
    try:
        return _DESCRIPTOR_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(message=f"Invalid backend descriptor: {exc}") from exc


def load_memory_descriptor(raw: str | bytes) -> MemoryDescriptor:
    """Parse a JSON :class:`MemoryDescriptor`."""
    try:
        return MemoryDescriptor.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(message=f"Invalid memory descriptor: {exc}") from exc
