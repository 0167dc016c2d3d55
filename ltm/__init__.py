"""Long-term memory for conversational agents.

Stores documents with their embeddings and retrieves the stored documents
most similar to a query document.  Embedding, vector indexing and document
persistence are pluggable backends behind the interfaces in
:mod:`ltm.interfaces`; :class:`LongTermMemory` orchestrates them.
"""

from ltm.memory import DEFAULT_TOP_K, LongTermMemory
from ltm.models.descriptors import MemoryDescriptor
from ltm.models.document import Document

__all__ = ["DEFAULT_TOP_K", "Document", "LongTermMemory", "MemoryDescriptor"]
