# gridfile/storage/memory_engine.py
"""
In-memory storage engine for development and testing.

Mimics GridFS behavior (files documents plus numbered chunks per bucket)
without a MongoDB server. NOT for production use.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId

from gridfile.constants import GridDefaults
from gridfile.storage.base import FileRecord, GridEngine, GridReadStream

logger = logging.getLogger(__name__)


@dataclass
class MemoryBucket:
    """Files documents and chunk data for one bucket."""
    files: dict[Any, dict[str, Any]] = field(default_factory=dict)
    chunks: dict[tuple[Any, int], bytes] = field(default_factory=dict)


class MemoryDatabase:
    """
    Stand-in for a database handle.

    Holds one MemoryBucket per bucket name, created on first access.
    """

    def __init__(self):
        self._buckets: dict[str, MemoryBucket] = {}

    def __getitem__(self, bucket: str) -> MemoryBucket:
        return self._buckets.setdefault(bucket, MemoryBucket())

    def cleanup(self) -> None:
        """Remove all stored content (for testing)."""
        self._buckets.clear()


class MemoryChunkReader:
    """Reads a file's chunks sequentially."""

    def __init__(self, bucket: MemoryBucket, record: FileRecord):
        self._bucket = bucket
        self._record = record
        self._chunk_number = 0
        self._buffer = b""
        self._position = 0

    async def read(self, size: int = -1) -> bytes:
        remainder = self._record.length - self._position
        if size < 0 or size > remainder:
            size = remainder

        while len(self._buffer) < size:
            key = (self._record.id, self._chunk_number)
            if key not in self._bucket.chunks:
                raise IOError(f"missing chunk {self._chunk_number} for file {self._record.id}")
            self._buffer += self._bucket.chunks[key]
            self._chunk_number += 1

        data, self._buffer = self._buffer[:size], self._buffer[size:]
        self._position += len(data)
        return data

    async def close(self) -> None:
        self._buffer = b""


class MemoryGridEngine(GridEngine):
    """
    In-memory GridFS-like engine.

    Splits uploads into chunk_size pieces keyed by (file id, chunk number),
    the same layout GridFS uses in its chunks collection.
    """

    def __init__(
        self,
        database: MemoryDatabase,
        bucket: str = GridDefaults.BUCKET,
        block_size: int = GridDefaults.READ_BLOCK_SIZE,
    ):
        self._bucket_name = bucket
        self._bucket = database[bucket]
        self._block_size = block_size

    @property
    def name(self) -> str:
        return "memory"

    async def upload(self, data: AsyncIterator[bytes], options) -> FileRecord:
        kwargs = options.to_engine_kwargs()
        file_id = kwargs.pop("_id", None)
        if file_id is None:
            file_id = ObjectId()
        chunk_size = kwargs.pop("chunkSize", GridDefaults.CHUNK_SIZE)

        if file_id in self._bucket.files:
            raise FileExistsError(f"file with _id {file_id!r} already exists")

        buffer = b""
        chunk_number = 0
        length = 0
        try:
            async for block in data:
                buffer += block
                length += len(block)
                while len(buffer) >= chunk_size:
                    self._bucket.chunks[(file_id, chunk_number)] = buffer[:chunk_size]
                    buffer = buffer[chunk_size:]
                    chunk_number += 1
        except Exception:
            self._drop_chunks(file_id)
            raise

        if buffer:
            self._bucket.chunks[(file_id, chunk_number)] = buffer

        document = {
            "_id": file_id,
            "length": length,
            "chunkSize": chunk_size,
            "uploadDate": datetime.now(timezone.utc),
            **kwargs,
        }
        self._bucket.files[file_id] = document

        logger.debug(f"Stored in memory bucket {self._bucket_name}: {file_id} ({length} bytes)")
        return FileRecord.from_document(document)

    def _matches(self, document: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())

    async def find_one(self, query: Mapping[str, Any]) -> Optional[FileRecord]:
        matches = [doc for doc in self._bucket.files.values() if self._matches(doc, query)]
        if not matches:
            return None
        # Ties on uploadDate go to the most recently inserted document
        _, newest = max(enumerate(matches), key=lambda item: (item[1]["uploadDate"], item[0]))
        return FileRecord.from_document(newest)

    async def find_ids(self, query: Mapping[str, Any]) -> list[Any]:
        return [doc["_id"] for doc in self._bucket.files.values() if self._matches(doc, query)]

    async def data_exists(self, record: FileRecord) -> bool:
        if record.length == 0:
            return True
        return (record.id, 0) in self._bucket.chunks

    async def open_read(self, record: FileRecord) -> GridReadStream:
        return GridReadStream(MemoryChunkReader(self._bucket, record), block_size=self._block_size)

    async def delete(self, file_id: Any) -> None:
        self._bucket.files.pop(file_id, None)
        self._drop_chunks(file_id)

    def _drop_chunks(self, file_id: Any) -> None:
        for key in [key for key in self._bucket.chunks if key[0] == file_id]:
            del self._bucket.chunks[key]
