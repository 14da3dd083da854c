# gridfile/storage/gridfs_engine.py
"""
GridFS storage engine using pymongo's async gridfs API.

Files live in <bucket>.files and chunks in <bucket>.chunks, exactly as
written by any other GridFS driver.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, Optional

from gridfs import AsyncGridFS, AsyncGridIn
from pymongo import DESCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from gridfile.constants import GridDefaults
from gridfile.storage.base import FileRecord, GridEngine, GridReadStream

logger = logging.getLogger(__name__)


class GridFSEngine(GridEngine):
    """
    GridFS engine bound to one bucket of an async database handle.

    Instances hold no state beyond collection handles, so the registry
    creates one per operation.
    """

    def __init__(
        self,
        database: AsyncDatabase,
        bucket: str = GridDefaults.BUCKET,
        block_size: int = GridDefaults.READ_BLOCK_SIZE,
    ):
        """
        Args:
            database: Open pymongo AsyncDatabase
            bucket: Root collection name of the GridFS bucket
            block_size: Block size for iterating read streams
        """
        self._bucket = bucket
        self._block_size = block_size
        self._collection = database[bucket]
        self._files = self._collection.files
        self._chunks = self._collection.chunks
        self._fs = AsyncGridFS(database, collection=bucket)

    @property
    def name(self) -> str:
        return "gridfs"

    @property
    def bucket(self) -> str:
        return self._bucket

    async def upload(self, data: AsyncIterator[bytes], options) -> FileRecord:
        """
        Pipe byte blocks into a new GridFS file.

        Raises:
            FileExistsError: If an explicit _id is already stored
            DuplicateKeyError: If another file claimed the _id mid-upload
        """
        kwargs = options.to_engine_kwargs()
        file_id = kwargs.get("_id")
        if file_id is not None and await self._files.find_one({"_id": file_id}, {"_id": 1}) is not None:
            raise FileExistsError(f"file with _id {file_id!r} already exists")

        grid_in = AsyncGridIn(self._collection, **kwargs)

        try:
            async for block in data:
                await grid_in.write(block)
            await grid_in.close()
        except DuplicateKeyError:
            # abort() deletes by _id, which now names another file's documents
            raise
        except Exception:
            # Remove chunks flushed before the failure
            await grid_in.abort()
            raise

        return FileRecord(
            id=grid_in._id,
            filename=grid_in.filename,
            length=grid_in.length,
            chunk_size=grid_in.chunk_size,
            upload_date=grid_in.upload_date,
            content_type=options.content_type,
            metadata=options.metadata,
            aliases=options.aliases,
        )

    async def find_one(self, query: Mapping[str, Any]) -> Optional[FileRecord]:
        document = await self._files.find_one(dict(query), sort=[("uploadDate", DESCENDING)])
        if document is None:
            return None
        return FileRecord.from_document(document)

    async def find_ids(self, query: Mapping[str, Any]) -> list[Any]:
        cursor = self._files.find(dict(query), {"_id": 1})
        return [document["_id"] async for document in cursor]

    async def data_exists(self, record: FileRecord) -> bool:
        """An empty file has no chunks; otherwise chunk 0 must be present."""
        if record.length == 0:
            return True
        chunk = await self._chunks.find_one({"files_id": record.id, "n": 0}, {"_id": 1})
        return chunk is not None

    async def open_read(self, record: FileRecord) -> GridReadStream:
        grid_out = await self._fs.get(record.id)
        return GridReadStream(grid_out, block_size=self._block_size)

    async def delete(self, file_id: Any) -> None:
        await self._fs.delete(file_id)
        logger.debug(f"Deleted from GridFS bucket {self._bucket}: {file_id}")
