"""Capability contracts for the memory's pluggable collaborators.

The memory only ever talks to these abstract base classes.  Concrete
backends live in ``ltm/providers/`` and are picked at composition time
(see :mod:`ltm.factory`), so swapping ChromaDB for Pinecone or one embedder
for another touches no pipeline code and tests can inject mocks.

    Interface      →  Concrete implementations (in ltm/providers/)
    ──────────────────────────────────────────────────────────────
    IEmbedder      →  OpenAIEmbedder, FastEmbedEmbedder
    IVectorStore   →  ChromaDBVectorStore, PineconeVectorStore
    IDataSource    →  SQLiteDataSource
"""

from ltm.interfaces.datasource import IDataSource
from ltm.interfaces.embedder import IEmbedder
from ltm.interfaces.vector_store import IVectorStore

__all__ = ["IDataSource", "IEmbedder", "IVectorStore"]
