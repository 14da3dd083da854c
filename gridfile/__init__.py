# gridfile/__init__.py
"""
gridfile: a small file registry over GridFS.

    from gridfile import initialize, write, read, remove

    initialize(get_database())
    record = await write(b"hello", {"filename": "hello.txt", "contentType": "text/plain"})
    found = await read("hello.txt")
    await remove(record.id)
"""

from gridfile.errors import (
    GridFileError,
    InvalidArgumentError,
    InvalidSelectorError,
    InvalidSourceError,
    NoMatchError,
    NotFoundError,
    RegistryNotInitializedError,
)
from gridfile.registry import (
    FileRegistry,
    WriteMode,
    WriteOptions,
    get_registry,
    initialize,
    read,
    remove,
    reset_registry,
    set_registry,
    with_callback,
    write,
)
from gridfile.storage import FileRecord, GridReadStream

__all__ = [
    "FileRegistry",
    "FileRecord",
    "GridReadStream",
    "WriteOptions",
    "WriteMode",
    "initialize",
    "get_registry",
    "set_registry",
    "reset_registry",
    "write",
    "read",
    "remove",
    "with_callback",
    "GridFileError",
    "InvalidArgumentError",
    "InvalidSelectorError",
    "InvalidSourceError",
    "NoMatchError",
    "NotFoundError",
    "RegistryNotInitializedError",
]
