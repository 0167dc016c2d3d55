"""Registry mapping descriptor kinds to backend factories.

Any backend class that exposes ``from_descriptor`` can be bound to a kind::

    from ltm.providers.registry import register_backend

    @register_backend("sqlite")
    class SQLiteDataSource(IDataSource):
        @classmethod
        def from_descriptor(cls, descriptor): ...

:func:`build_backend` turns a :mod:`ltm.models.descriptors` variant back
into a live backend without the caller knowing any constructor signature.
Built-in provider modules are imported on first use of their kind, so
chromadb is never imported by a process that only talks to Pinecone.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Callable

import structlog

from ltm.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

BackendFactory = Callable[[Any], Any]

_registry: dict[str, BackendFactory] = {}

# kind -> module whose import registers the built-in backend for that kind.
_BUILTIN_MODULES: dict[str, str] = {
    "sqlite": "ltm.providers.datasource.sqlite_datasource",
    "chromadb": "ltm.providers.vector_store.chromadb_store",
    "pinecone": "ltm.providers.vector_store.pinecone_store",
}


def register_backend(kind: str):
    """Class decorator that registers ``cls.from_descriptor`` under *kind*."""

    def decorator(cls):
        factory = getattr(cls, "from_descriptor", None)
        if factory is None:
            raise TypeError(f"{cls.__name__} must define a from_descriptor classmethod")
        if kind in _registry:
            raise ValueError(f"Backend kind '{kind}' already registered")
        _registry[kind] = factory
        return cls

    return decorator


def get_factory(kind: str) -> BackendFactory:
    """Return the factory for *kind*, importing a built-in module if needed."""
    if kind not in _registry and kind in _BUILTIN_MODULES:
        import_module(_BUILTIN_MODULES[kind])
    try:
        return _registry[kind]
    except KeyError:
        raise ConfigurationError(
            message=f"No backend registered for descriptor kind '{kind}'",
        ) from None


def build_backend(descriptor: Any) -> Any:
    """Construct a live backend equivalent to the one that produced *descriptor*."""
    factory = get_factory(descriptor.kind)
    backend = factory(descriptor)
    logger.debug("backend_built", kind=descriptor.kind, backend=type(backend).__name__)
    return backend


def registered_kinds() -> list[str]:
    """Return every kind with a registered factory, sorted."""
    return sorted(_registry)
