# gridfile/storage/base.py
"""
Storage engine interface for chunked file storage.

Design principles:
- The engine owns chunk layout, indexes and queries; the registry never
  touches chunk documents directly
- File metadata documents follow the GridFS files-collection schema
  (_id, filename, length, chunkSize, uploadDate, contentType, metadata, aliases)
- Engines are cheap, short-lived accessors bound to a database handle
- Engine errors are raised unmodified
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Protocol

from gridfile.constants import GridDefaults


class ChunkReader(Protocol):
    """Async reader over a stored file's bytes (e.g. gridfs.AsyncGridOut)."""

    async def read(self, size: int = -1) -> bytes: ...

    async def close(self) -> None: ...


class GridReadStream:
    """
    Readable byte stream over a stored file.

    Supports read(size), async iteration in blocks, and async context
    management. Closing is idempotent.
    """

    def __init__(self, reader: ChunkReader, block_size: int = GridDefaults.READ_BLOCK_SIZE):
        self._reader = reader
        self._block_size = block_size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self, size: int = -1) -> bytes:
        """Read at most `size` bytes (all remaining bytes if size is negative)."""
        if self._closed:
            raise ValueError("I/O operation on closed stream")
        return await self._reader.read(size)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            await self._reader.close()

    def __aiter__(self) -> "GridReadStream":
        return self

    async def __anext__(self) -> bytes:
        data = await self.read(self._block_size)
        if not data:
            raise StopAsyncIteration
        return data

    async def __aenter__(self) -> "GridReadStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


@dataclass
class FileRecord:
    """Metadata describing a stored file, optionally with an open read stream."""
    id: Any
    filename: Optional[str]
    length: int
    chunk_size: int
    upload_date: Optional[datetime] = None
    content_type: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    aliases: Optional[list[str]] = None
    stream: Optional[GridReadStream] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "FileRecord":
        """Build a record from a GridFS files-collection document."""
        return cls(
            id=document["_id"],
            filename=document.get("filename"),
            length=int(document.get("length", 0)),
            chunk_size=int(document.get("chunkSize", GridDefaults.CHUNK_SIZE)),
            upload_date=document.get("uploadDate"),
            content_type=document.get("contentType"),
            metadata=document.get("metadata"),
            aliases=document.get("aliases"),
        )


class GridEngine(ABC):
    """
    Abstract interface for a chunked file storage engine.

    Implementations must handle:
    - Splitting uploaded bytes into chunks and writing the files document
    - Looking up files documents by query
    - Reporting whether a file's chunk data is present
    - Deleting a file and all of its chunks
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name (e.g., 'gridfs', 'memory')."""
        pass

    @abstractmethod
    async def upload(self, data: AsyncIterator[bytes], options) -> FileRecord:
        """
        Store a new file from an async stream of byte blocks.

        Args:
            data: Byte blocks in file order
            options: WriteOptions (filename, content type, chunk size, ...)

        Returns:
            FileRecord of the finalized file
        """
        pass

    @abstractmethod
    async def find_one(self, query: Mapping[str, Any]) -> Optional[FileRecord]:
        """
        Find the newest file matching a files-collection query.

        Returns:
            FileRecord, or None if nothing matches
        """
        pass

    @abstractmethod
    async def find_ids(self, query: Mapping[str, Any]) -> list[Any]:
        """Return the ids of every file matching a files-collection query."""
        pass

    @abstractmethod
    async def data_exists(self, record: FileRecord) -> bool:
        """Check that the chunk data backing a record is present."""
        pass

    @abstractmethod
    async def open_read(self, record: FileRecord) -> GridReadStream:
        """Open a read stream over a record's chunk data."""
        pass

    @abstractmethod
    async def delete(self, file_id: Any) -> None:
        """
        Delete a file and its chunks.

        Deleting a file that does not exist is not an error.
        """
        pass
