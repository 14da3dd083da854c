# gridfile/registry/__init__.py
"""
File registry: write, read and remove files in a GridFS bucket by
identifier or filename.
"""

from gridfile.registry.callbacks import with_callback
from gridfile.registry.factory import (
    get_registry,
    initialize,
    read,
    remove,
    reset_registry,
    set_registry,
    write,
)
from gridfile.registry.options import WriteMode, WriteOptions
from gridfile.registry.registry import FileRegistry
from gridfile.registry.selectors import (
    Selector,
    SelectorKind,
    resolve_removal_selector,
    resolve_selector,
)
from gridfile.registry.sources import Source, SourceKind

__all__ = [
    "FileRegistry",
    "WriteOptions",
    "WriteMode",
    "Selector",
    "SelectorKind",
    "Source",
    "SourceKind",
    "resolve_selector",
    "resolve_removal_selector",
    "with_callback",
    "initialize",
    "get_registry",
    "set_registry",
    "reset_registry",
    "write",
    "read",
    "remove",
]
