"""Assemble a :class:`LongTermMemory` from :class:`Settings`.

Backends are selected at composition time: the settings are turned into
descriptors and built through the registry, the same path used when a
memory is rebuilt from a stored descriptor.
"""

from __future__ import annotations

from ltm.config.settings import Settings
from ltm.interfaces.datasource import IDataSource
from ltm.interfaces.embedder import IEmbedder
from ltm.interfaces.vector_store import IVectorStore
from ltm.memory import LongTermMemory
from ltm.models.descriptors import (
    ChromaDBDescriptor,
    DistanceMetric,
    PineconeDescriptor,
    SQLiteDescriptor,
)
from ltm.providers.embedding.fastembed_embedder import FastEmbedEmbedder
from ltm.providers.embedding.openai_embedder import OpenAIEmbedder
from ltm.providers.registry import build_backend
from ltm.utils.errors import ConfigurationError
from ltm.utils.logging import configure_logging, get_logger
from ltm.utils.paths import generate_name, memory_home, memory_subfolder

logger = get_logger(__name__)


def build_embedder(settings: Settings) -> IEmbedder:
    """Return the embedder named by ``settings.embedding_provider``."""
    provider = settings.embedding_provider.lower()
    if provider == "openai":
        if not settings.openai_api_key and not settings.openai_base_url:
            raise ConfigurationError(
                message="LTM_OPENAI_API_KEY or LTM_OPENAI_BASE_URL is required for the openai embedder",
                provider_name="openai_embedding",
            )
        return OpenAIEmbedder(settings)
    if provider == "fastembed":
        return FastEmbedEmbedder(settings.fastembed_model or None)
    raise ConfigurationError(message=f"Unknown embedding provider '{settings.embedding_provider}'")


def build_vector_store(settings: Settings, dimensions: int) -> IVectorStore:
    """Return the vector store named by ``settings.vector_store_kind``.

    *dimensions* is used when ``settings.vector_dimensions`` is 0.
    """
    kind = settings.vector_store_kind.lower()
    if kind == "chromadb":
        try:
            space = DistanceMetric(settings.chromadb_space)
        except ValueError as exc:
            raise ConfigurationError(
                message=f"Unsupported distance metric '{settings.chromadb_space}'",
                provider_name="chromadb",
            ) from exc
        resolved = settings.vector_dimensions or dimensions
        if resolved <= 0:
            raise ConfigurationError(
                message=f"dimensions must be greater than 0, got {resolved}",
                provider_name="chromadb",
            )
        descriptor = ChromaDBDescriptor(
            path=settings.chromadb_path
            or str(memory_subfolder("chromadb", settings.memory_home or None)),
            collection=settings.chromadb_collection,
            dimensions=resolved,
            space=space,
        )
    elif kind == "pinecone":
        descriptor = PineconeDescriptor(
            api_key=settings.pinecone_api_key,
            index_name=settings.pinecone_index_name,
            project_name=settings.pinecone_project_name,
            environment=settings.pinecone_environment,
            namespace=settings.pinecone_namespace or generate_name(10),
        )
    else:
        raise ConfigurationError(
            message=f"Unknown vector store kind '{settings.vector_store_kind}'",
        )
    return build_backend(descriptor)


def build_datasource(settings: Settings) -> IDataSource:
    """Return the SQLite data source described by the settings."""
    path = settings.datasource_path or str(
        memory_home(settings.memory_home or None) / f"{generate_name(10)}.db"
    )
    return build_backend(SQLiteDescriptor(path=path))


def build_memory(settings: Settings | None = None) -> LongTermMemory:
    """Build a fully wired :class:`LongTermMemory`.

    Construction errors (missing credentials, zero dimensions) are raised
    as :class:`ConfigurationError`; the caller decides whether to abort.
    """
    settings = settings or Settings()
    configure_logging(log_level=settings.log_level, app_env=settings.app_env)

    embedder = build_embedder(settings)
    vector_store = build_vector_store(settings, embedder.get_dimension())
    datasource = build_datasource(settings)

    logger.info(
        "ltm_memory_built",
        embedder=embedder.get_provider_name(),
        vector_store=vector_store.get_provider_name(),
        datasource=datasource.get_provider_name(),
    )
    return LongTermMemory(
        embedder=embedder,
        vector_store=vector_store,
        datasource=datasource,
        default_top_k=settings.default_top_k,
    )
