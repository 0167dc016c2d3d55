"""Data models shared across the memory: documents and backend descriptors."""

from ltm.models.descriptors import (
    BackendDescriptor,
    ChromaDBDescriptor,
    DistanceMetric,
    MemoryDescriptor,
    PineconeDescriptor,
    SQLiteDescriptor,
    dump_descriptor,
    load_descriptor,
    load_memory_descriptor,
)
from ltm.models.document import Document

__all__ = [
    "BackendDescriptor",
    "ChromaDBDescriptor",
    "DistanceMetric",
    "Document",
    "MemoryDescriptor",
    "PineconeDescriptor",
    "SQLiteDescriptor",
    "dump_descriptor",
    "load_descriptor",
    "load_memory_descriptor",
]
