# gridfile/registry/factory.py
"""
Process-wide file registry.

initialize() stores one FileRegistry; the module-level write/read/remove
coroutines delegate to it. Code that needs several registries should build
FileRegistry instances directly instead.
"""

import logging
from collections.abc import Mapping
from types import ModuleType
from typing import Any, Optional

import bson

from gridfile.errors import RegistryNotInitializedError
from gridfile.registry.options import WriteOptions
from gridfile.registry.registry import FileRegistry
from gridfile.storage.base import FileRecord

logger = logging.getLogger(__name__)

# Global singleton instance
_registry: Optional[FileRegistry] = None


def initialize(database: Any, driver: ModuleType = bson, **kwargs) -> FileRegistry:
    """
    Create the process-wide registry.

    Args:
        database: Open database handle
        driver: Module providing the identifier type (default: bson)
        **kwargs: Additional FileRegistry arguments (bucket, engine_factory, ...)

    Returns:
        The new FileRegistry

    Raises:
        InvalidArgumentError: If database or driver is unusable
    """
    global _registry

    registry = FileRegistry(database, driver, **kwargs)
    if _registry is not None:
        logger.warning("File registry re-initialized; replacing previous instance")
    _registry = registry
    return registry


def get_registry() -> FileRegistry:
    """
    Get the process-wide registry.

    Raises:
        RegistryNotInitializedError: If initialize() has not been called
    """
    if _registry is None:
        raise RegistryNotInitializedError()
    return _registry


def set_registry(registry: FileRegistry) -> None:
    """
    Set a custom registry (useful for testing).
    """
    global _registry
    _registry = registry


def reset_registry() -> None:
    """
    Reset the registry singleton (for testing).
    """
    global _registry
    _registry = None


async def write(source: Any, options: WriteOptions | Mapping[str, Any] | None = None) -> FileRecord:
    """Write through the process-wide registry. See FileRegistry.write."""
    return await get_registry().write(source, options)


async def read(selector: Any) -> FileRecord:
    """Read through the process-wide registry. See FileRegistry.read."""
    return await get_registry().read(selector)


async def remove(selector: Any) -> None:
    """Remove through the process-wide registry. See FileRegistry.remove."""
    await get_registry().remove(selector)
