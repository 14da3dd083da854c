# gridfile/registry/registry.py
"""
FileRegistry: write, read and remove files in a GridFS bucket.

The registry is an explicit client object. It stores the database handle
and the driver module (the source of the identifier type), and builds a
short-lived storage engine for each operation.
"""

import logging
from collections.abc import Callable, Mapping
from types import ModuleType
from typing import Any, Optional

import bson

from gridfile.config import get_settings
from gridfile.errors import InvalidArgumentError, NoMatchError, NotFoundError
from gridfile.logging_config import log_grid_operation
from gridfile.registry.options import WriteMode, WriteOptions
from gridfile.registry.selectors import SelectorKind, resolve_removal_selector, resolve_selector
from gridfile.registry.sources import Source
from gridfile.storage.base import FileRecord, GridEngine
from gridfile.storage.gridfs_engine import GridFSEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[..., GridEngine]


class FileRegistry:
    """
    File registry bound to one database handle.

    Usage:
        registry = FileRegistry(get_database())

        record = await registry.write("report.pdf", {"filename": "report.pdf"})
        found = await registry.read("report.pdf")
        async with found.stream as stream:
            data = await stream.read()
        await registry.remove(record.id)
    """

    def __init__(
        self,
        database: Any,
        driver: ModuleType = bson,
        *,
        bucket: Optional[str] = None,
        engine_factory: EngineFactory = GridFSEngine,
        default_filename: Optional[str] = None,
        block_size: Optional[int] = None,
    ):
        """
        Args:
            database: Open database handle (pymongo AsyncDatabase for GridFSEngine)
            driver: Module providing the identifier type as `ObjectId` (default: bson)
            bucket: GridFS bucket name (default: GRIDFS_BUCKET setting)
            engine_factory: Callable(database, bucket=..., block_size=...) returning a GridEngine
            default_filename: Filename for unnamed writes (default: DEFAULT_FILENAME setting)
            block_size: Source/stream block size (default: READ_BLOCK_SIZE setting)

        Raises:
            InvalidArgumentError: If database is missing or driver has no ObjectId type
        """
        if database is None:
            raise InvalidArgumentError("A database handle is required")
        if driver is None or not isinstance(getattr(driver, "ObjectId", None), type):
            raise InvalidArgumentError("driver must provide an ObjectId type (e.g. the bson module)")

        settings = get_settings()
        self._database = database
        self._driver = driver
        self._bucket = bucket or settings.GRIDFS_BUCKET
        self._engine_factory = engine_factory
        self._default_filename = default_filename or settings.DEFAULT_FILENAME
        self._block_size = block_size or settings.READ_BLOCK_SIZE

        if self._block_size <= 0:
            raise InvalidArgumentError("block_size must be positive")

        logger.info(f"File registry initialized: bucket={self._bucket}")

    @property
    def database(self) -> Any:
        return self._database

    @property
    def driver(self) -> ModuleType:
        return self._driver

    @property
    def bucket(self) -> str:
        return self._bucket

    def _engine(self) -> GridEngine:
        """Create a storage accessor bound to the stored database handle."""
        return self._engine_factory(self._database, bucket=self._bucket, block_size=self._block_size)

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    async def write(
        self,
        source: Any,
        options: WriteOptions | Mapping[str, Any] | None = None,
    ) -> FileRecord:
        """
        Write a new file from a stream, bytes, or a filesystem path.

        Args:
            source: Readable stream (sync or async), bytes-like object, or path
            options: WriteOptions or a mapping of its fields

        Returns:
            FileRecord of the stored file

        Raises:
            InvalidSourceError: If source is none of the supported kinds
            InvalidArgumentError: If options are invalid
            OSError: If a path source cannot be opened or read
        """
        src = Source.from_value(source)
        opts = WriteOptions.from_value(options).with_defaults(self._default_filename)
        engine = self._engine()

        with log_grid_operation("write", opts.filename) as metrics:
            record = await engine.upload(src.blocks(self._block_size), opts)
            metrics["size_bytes"] = record.length
            metrics["file_id"] = record.id

        logger.info(f"Stored {src.kind.value} source {src.label} as {record.filename} ({record.id})")

        if opts.mode == WriteMode.OVERWRITE:
            await self._remove_older_revisions(engine, record)

        return record

    async def _remove_older_revisions(self, engine: GridEngine, record: FileRecord) -> None:
        """Delete every other file sharing the record's filename."""
        ids = await engine.find_ids({"filename": record.filename})
        for file_id in ids:
            if file_id != record.id:
                await engine.delete(file_id)
                logger.info(f"Overwrote revision {file_id} of {record.filename}")

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    async def read(self, selector: Any) -> FileRecord:
        """
        Find a file by identifier or filename and open a stream over it.

        When several revisions share a filename, the newest one is returned.

        Returns:
            FileRecord with `stream` set to an open GridReadStream

        Raises:
            InvalidSelectorError: If selector is neither an identifier nor a filename
            NoMatchError: If no file matches
            NotFoundError: If the file's chunk data is missing
        """
        resolved = resolve_selector(selector, self._driver)
        engine = self._engine()

        with log_grid_operation("read", str(resolved)) as metrics:
            record = await engine.find_one(resolved.query)
            if record is None:
                raise NoMatchError()

            if not await engine.data_exists(record):
                logger.warning(f"File {record.id} has metadata but no chunk data")
                raise NotFoundError()

            record.stream = await engine.open_read(record)
            metrics["size_bytes"] = record.length
            metrics["file_id"] = record.id

        return record

    # -------------------------------------------------------------------------
    # Remove
    # -------------------------------------------------------------------------

    async def remove(self, selector: Any) -> None:
        """
        Remove a file by identifier, by filename (all revisions), or by a
        mapping with an "_id" or "filename" entry.

        Removing a selector that matches nothing succeeds.

        Raises:
            InvalidSelectorError: If selector cannot be resolved
        """
        resolved = resolve_removal_selector(selector, self._driver)
        engine = self._engine()

        with log_grid_operation("remove", str(resolved)) as metrics:
            if resolved.kind == SelectorKind.ID:
                ids = [resolved.value]
            else:
                ids = await engine.find_ids(resolved.query)

            for file_id in ids:
                await engine.delete(file_id)

            if len(ids) == 1:
                metrics["file_id"] = ids[0]

        if not ids:
            logger.debug(f"Nothing to remove for {resolved}")
