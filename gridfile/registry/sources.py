# gridfile/registry/sources.py
"""
Write sources: the byte origin of a write, classified once at the boundary.

- STREAM: anything with a read() method (sync or async) or an async iterable of bytes
- BYTES: bytes, bytearray or memoryview
- PATH: str or os.PathLike naming a file on disk
"""

import asyncio
import inspect
import os
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from gridfile.constants import GridDefaults
from gridfile.errors import InvalidSourceError


class SourceKind(str, Enum):
    """Kinds of write source."""

    STREAM = "stream"
    BYTES = "bytes"
    PATH = "path"


def _is_stream(value: Any) -> bool:
    return callable(getattr(value, "read", None)) or hasattr(value, "__aiter__")


@dataclass(frozen=True)
class Source:
    """A classified write source."""
    kind: SourceKind
    value: Any

    @classmethod
    def from_value(cls, value: Any) -> "Source":
        """
        Classify a caller-supplied source.

        Raises:
            InvalidSourceError: If value is not a stream, bytes-like or a path
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(SourceKind.BYTES, value)
        if isinstance(value, (str, os.PathLike)):
            return cls(SourceKind.PATH, value)
        if _is_stream(value):
            return cls(SourceKind.STREAM, value)
        raise InvalidSourceError()

    @property
    def label(self) -> str:
        """Short description for logs."""
        if self.kind == SourceKind.PATH:
            return os.fspath(self.value)
        if self.kind == SourceKind.BYTES:
            return f"<{len(self.value)} bytes>"
        return f"<{type(self.value).__name__}>"

    async def blocks(self, block_size: int = GridDefaults.READ_BLOCK_SIZE) -> AsyncIterator[bytes]:
        """
        Yield the source's bytes in blocks of at most block_size.

        PATH sources are opened on first iteration, so open errors surface
        from the write that consumes them. File and sync-stream reads run in
        the default executor.
        """
        if self.kind == SourceKind.BYTES:
            data = bytes(self.value)
            for start in range(0, len(data), block_size):
                yield data[start:start + block_size]
        elif self.kind == SourceKind.PATH:
            loop = asyncio.get_running_loop()
            fh = await loop.run_in_executor(None, open, self.value, "rb")
            try:
                while True:
                    data = await loop.run_in_executor(None, fh.read, block_size)
                    if not data:
                        break
                    yield data
            finally:
                fh.close()
        elif callable(getattr(self.value, "read", None)):
            async for data in _read_blocks(self.value, block_size):
                yield data
        else:
            async for data in self.value:
                yield _as_bytes(data)


async def _read_blocks(stream: Any, block_size: int) -> AsyncIterator[bytes]:
    """Drain a sync or async file-like object."""
    loop = asyncio.get_running_loop()
    blocking = not inspect.iscoroutinefunction(stream.read)
    while True:
        if blocking:
            data = await loop.run_in_executor(None, stream.read, block_size)
        else:
            data = stream.read(block_size)
        if inspect.isawaitable(data):
            data = await data
        if not data:
            break
        yield _as_bytes(data)


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    # Text-mode streams yield str
    raise InvalidSourceError("Source stream must produce bytes, not " + type(data).__name__)
