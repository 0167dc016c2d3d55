"""Utility modules for ltm.

- **errors** -- exception hierarchy rooted at LTMError; each backend family
  raises its own subclass and the orchestrator tags it with the failing
  pipeline stage.
- **logging** -- structlog setup with a dual renderer: coloured console
  output in development, structured JSON in production.
- **paths** -- default storage folders for backends built without a path.
"""

from ltm.utils.errors import (
    ConfigurationError,
    DataSourceError,
    DimensionMismatchError,
    DocumentEncodingError,
    DocumentNotFoundError,
    EmbeddingError,
    LTMError,
    PipelineStage,
    VectorStoreError,
    WriteCountMismatchError,
)
from ltm.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DataSourceError",
    "DimensionMismatchError",
    "DocumentEncodingError",
    "DocumentNotFoundError",
    "EmbeddingError",
    "LTMError",
    "PipelineStage",
    "VectorStoreError",
    "WriteCountMismatchError",
    "configure_logging",
    "get_logger",
]
