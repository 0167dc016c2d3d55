"""SQLite-backed data source.

Uses a single SQLite file as an embedded key/value store: one ``ltm`` table
mapping the canonical string form of a document id to the document's JSON
encoding.  Uses ``aiosqlite`` for async I/O with one connection per
operation, so concurrent calls on one instance never share a cursor.

Re-storing an id overwrites the previous value.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from uuid import UUID

import aiosqlite
import structlog

from ltm.interfaces.datasource import IDataSource
from ltm.models.descriptors import SQLiteDescriptor
from ltm.models.document import Document
from ltm.providers.registry import register_backend
from ltm.utils.errors import (
    ConfigurationError,
    DataSourceError,
    DocumentEncodingError,
    DocumentNotFoundError,
)
from ltm.utils.paths import generate_name, memory_home

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "sqlite"

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS ltm (
    key    TEXT PRIMARY KEY,
    value  BLOB NOT NULL
);
"""

_UPSERT_SQL = """\
INSERT INTO ltm (key, value)
VALUES (?, ?)
ON CONFLICT(key) DO UPDATE SET value = excluded.value;
"""

_SELECT_SQL = "SELECT value FROM ltm WHERE key = ?;"


@register_backend("sqlite")
class SQLiteDataSource(IDataSource):
    """Document store persisted to one SQLite file.

    Parameters
    ----------
    path:
        Database file.  When empty, a file with a random 10-character name
        is created under the memory home folder.
    memory_home_dir:
        Overrides the memory home folder used for the generated path.
    """

    def __init__(self, path: str | Path = "", memory_home_dir: str | Path | None = None) -> None:
        if not path:
            path = memory_home(memory_home_dir) / f"{generate_name(10)}.db"
        self._db_path = Path(path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                message=f"Cannot create folder for SQLite data source at {self._db_path}: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        self._descriptor = SQLiteDescriptor(path=str(self._db_path))
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()
        self._closed = False

    @classmethod
    def from_descriptor(cls, descriptor: SQLiteDescriptor) -> SQLiteDataSource:
        return cls(path=descriptor.path)

    async def initialize(self) -> None:
        """Create the ``ltm`` table if it does not exist yet."""
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    await db.execute(_CREATE_TABLE_SQL)
                    await db.commit()
            except aiosqlite.Error as exc:
                raise DataSourceError(
                    message=f"Cannot initialise SQLite data source at {self._db_path}: {exc}",
                    provider_name=_PROVIDER_NAME,
                ) from exc
            self._schema_ready = True
        logger.info("sqlite_datasource_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # IDataSource implementation
    # ------------------------------------------------------------------

    async def get_document(self, document_id: UUID) -> Document:
        await self._ensure_ready()
        key = str(document_id)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (key,))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise DataSourceError(
                message=f"Reading document {key} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if row is None:
            logger.debug("sqlite_document_missing", document_id=key)
            raise DocumentNotFoundError(
                message=f"No document stored under id {key}",
                provider_name=_PROVIDER_NAME,
            )

        try:
            return Document.from_json(row[0])
        except DocumentEncodingError as exc:
            raise DocumentEncodingError(
                message=f"Stored value for {key} is not a document: {exc.message}",
                provider_name=_PROVIDER_NAME,
            ) from exc

    async def get_documents(self, document_ids: list[UUID]) -> list[Document]:
        """Fetch documents one by one, stopping at the first failure."""
        documents: list[Document] = []
        for document_id in document_ids:
            documents.append(await self.get_document(document_id))
        return documents

    async def store_document(self, document: Document) -> None:
        await self._ensure_ready()
        key = str(document.id)
        payload = document.to_json()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_UPSERT_SQL, (key, payload))
                await db.commit()
        except aiosqlite.Error as exc:
            raise DataSourceError(
                message=f"Writing document {key} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        logger.debug("sqlite_document_stored", document_id=key, size=len(payload))

    async def close(self) -> None:
        """Mark the data source closed; connections are per-operation."""
        if not self._closed:
            self._closed = True
            logger.debug("sqlite_datasource_closed", path=str(self._db_path))

    def get_descriptor(self) -> SQLiteDescriptor:
        return self._descriptor

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _ensure_ready(self) -> None:
        if self._closed:
            raise DataSourceError(
                message=f"SQLite data source at {self._db_path} is closed",
                provider_name=_PROVIDER_NAME,
            )
        if not self._schema_ready:
            await self.initialize()
