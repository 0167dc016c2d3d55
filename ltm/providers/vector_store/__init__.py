"""Vector store implementations.

Two implementations of IVectorStore:
    ChromaDBVectorStore : local persistent index (descriptor kind "chromadb").
    PineconeVectorStore : remote Pinecone index over REST (kind "pinecone").

Modules are not imported here so that chromadb is only loaded by processes
that use it; import the class from its module or go through
:func:`ltm.providers.registry.build_backend`.
"""
