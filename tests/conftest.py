"""Shared pytest fixtures for the ltm test suite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ltm.interfaces.datasource import IDataSource
from ltm.interfaces.embedder import IEmbedder
from ltm.interfaces.vector_store import IVectorStore
from ltm.models.descriptors import ChromaDBDescriptor, SQLiteDescriptor
from ltm.models.document import Document
from tests.helpers import HashingEmbedder


@pytest.fixture
def embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def sample_document() -> Document:
    return Document(
        content="the user prefers window seats on long flights",
        metadata={"speaker": "user", "turn": 3, "tags": ["travel", "preference"]},
    )


@pytest.fixture
def memory_home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point generated storage paths at a temp folder."""
    home = tmp_path / "memory_home"
    monkeypatch.setenv("LTM_MEMORY_HOME", str(home))
    return home


@pytest.fixture
def mock_embedder() -> MagicMock:
    mock = MagicMock(spec=IEmbedder)
    mock.embed_document = AsyncMock(return_value=[0.1] * 4)
    mock.get_dimension.return_value = 4
    mock.get_provider_name.return_value = "mock_embedding"
    mock.is_available.return_value = True
    return mock


@pytest.fixture
def mock_vector_store(tmp_path: Path) -> MagicMock:
    mock = MagicMock(spec=IVectorStore)
    mock.store_vector = AsyncMock(return_value=None)
    mock.query_similarity = AsyncMock(return_value=[])
    mock.close = AsyncMock(return_value=None)
    mock.get_descriptor.return_value = ChromaDBDescriptor(
        path=str(tmp_path / "chroma"), collection="ltm", dimensions=4
    )
    mock.get_provider_name.return_value = "mock_vector_store"
    return mock


@pytest.fixture
def mock_datasource(tmp_path: Path) -> MagicMock:
    mock = MagicMock(spec=IDataSource)
    mock.get_document = AsyncMock()
    mock.get_documents = AsyncMock(return_value=[])
    mock.store_document = AsyncMock(return_value=None)
    mock.close = AsyncMock(return_value=None)
    mock.get_descriptor.return_value = SQLiteDescriptor(path=str(tmp_path / "ltm.db"))
    mock.get_provider_name.return_value = "mock_datasource"
    return mock
