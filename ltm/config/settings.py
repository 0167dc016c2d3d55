"""Settings loaded from environment variables via pydantic-settings.

Every field maps to an ``LTM_``-prefixed environment variable (field
``pinecone_api_key`` reads ``LTM_PINECONE_API_KEY``) and may also come from
a local ``.env`` file.  Environment variables win over the ``.env`` file;
defaults apply when neither is set.

Empty strings mean "not configured": backends substitute a generated
storage path or namespace, and :mod:`ltm.factory` skips providers whose
credentials are missing.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Long-term memory settings."""

    model_config = SettingsConfigDict(
        env_prefix="LTM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Storage roots ===
    memory_home: str = ""  # Empty => ~/memory

    # === DataSource (embedded key/value store) ===
    datasource_path: str = ""  # Empty => <memory home>/<random>.db

    # === VectorStore ===
    vector_store_kind: str = "chromadb"  # "chromadb" | "pinecone"
    vector_dimensions: int = 0  # 0 => use the embedder's dimension

    chromadb_path: str = ""  # Empty => <memory home>/chromadb
    chromadb_collection: str = "ltm"
    chromadb_space: str = "cosine"

    pinecone_api_key: str = ""
    pinecone_index_name: str = ""
    pinecone_project_name: str = ""
    pinecone_environment: str = ""
    pinecone_namespace: str = ""  # Empty => random 10-character namespace

    # === Embedder ===
    embedding_provider: str = "openai"  # "openai" | "fastembed"
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embedding_model: str = ""
    fastembed_model: str = ""

    # === Retrieval ===
    default_top_k: int = 10

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_vector_stores(self) -> list[str]:
        """Return the vector-store kinds that have enough configuration."""
        kinds = ["chromadb"]
        if all(
            (
                self.pinecone_api_key,
                self.pinecone_index_name,
                self.pinecone_project_name,
                self.pinecone_environment,
            )
        ):
            kinds.append("pinecone")
        return kinds
