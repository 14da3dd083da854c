# gridfile/storage/__init__.py
"""
Storage engine abstraction for chunked file storage.

File bodies are split into chunks by the engine (GridFS in production).
The registry only talks to the GridEngine interface.
"""

from gridfile.storage.base import (
    ChunkReader,
    FileRecord,
    GridEngine,
    GridReadStream,
)
from gridfile.storage.gridfs_engine import GridFSEngine
from gridfile.storage.memory_engine import MemoryDatabase, MemoryGridEngine

__all__ = [
    "ChunkReader",
    "FileRecord",
    "GridEngine",
    "GridReadStream",
    "GridFSEngine",
    "MemoryDatabase",
    "MemoryGridEngine",
]
