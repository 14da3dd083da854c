# gridfile/registry/selectors.py
"""
Selector resolution: decide whether a caller-supplied value addresses a
file by identifier or by filename.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any

from gridfile.errors import InvalidSelectorError


class SelectorKind(str, Enum):
    """How a selector addresses a file."""

    ID = "id"
    FILENAME = "filename"


@dataclass(frozen=True)
class Selector:
    """A resolved identifier-or-filename selector."""
    kind: SelectorKind
    value: Any

    @property
    def query(self) -> dict[str, Any]:
        """Files-collection query for this selector."""
        if self.kind == SelectorKind.ID:
            return {"_id": self.value}
        return {"filename": self.value}

    def __str__(self) -> str:
        return str(self.value)


def try_parse_id(value: Any, driver: ModuleType) -> Any:
    """
    Parse value as the driver's identifier type.

    Returns:
        The identifier, or None if value is not (and cannot be parsed as) one
    """
    object_id = driver.ObjectId
    if isinstance(value, object_id):
        return value
    if isinstance(value, str) and object_id.is_valid(value):
        return object_id(value)
    return None


def resolve_selector(value: Any, driver: ModuleType) -> Selector:
    """
    Resolve a value to a selector, trying the identifier form first.

    Raises:
        InvalidSelectorError: If value is neither an identifier nor a non-empty string
    """
    file_id = try_parse_id(value, driver)
    if file_id is not None:
        return Selector(SelectorKind.ID, file_id)
    if isinstance(value, str) and value:
        return Selector(SelectorKind.FILENAME, value)
    raise InvalidSelectorError()


def resolve_removal_selector(value: Any, driver: ModuleType) -> Selector:
    """
    Resolve a remove() argument.

    Besides plain selectors, accepts a mapping with an "_id" or "filename"
    entry. "_id" wins when both are present, and each entry is only
    interpreted as the kind its key names.
    """
    if isinstance(value, Mapping):
        if value.get("_id") is not None:
            file_id = try_parse_id(value["_id"], driver)
            if file_id is None:
                raise InvalidSelectorError()
            return Selector(SelectorKind.ID, file_id)
        filename = value.get("filename")
        if isinstance(filename, str) and filename:
            return Selector(SelectorKind.FILENAME, filename)
        raise InvalidSelectorError()
    if not isinstance(value, (str, driver.ObjectId)):
        raise InvalidSelectorError()
    return resolve_selector(value, driver)
