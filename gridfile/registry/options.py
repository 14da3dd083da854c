# gridfile/registry/options.py
"""
Write options for the file registry.

Accepts both snake_case names and the GridFS document field names
(contentType, chunkSize, _id) so options can be passed straight through
from code written against the files-collection schema.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gridfile.errors import InvalidArgumentError


class WriteMode(str, Enum):
    """How a write treats files that already carry the same filename."""

    WRITE = "w"  # Store a new revision; older revisions stay readable by id
    OVERWRITE = "overwrite"  # Store a new revision, then delete older ones


class WriteOptions(BaseModel):
    """Options for a single write."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    filename: str | None = Field(None, description="Target filename (default: DEFAULT_FILENAME setting)")
    content_type: str | None = Field(None, alias="contentType", description="MIME type of the content")
    mode: WriteMode = Field(WriteMode.WRITE, description="Write mode")
    file_id: Any = Field(None, alias="_id", description="Explicit file id (default: new ObjectId)")
    chunk_size: int | None = Field(None, alias="chunkSize", gt=0, description="Chunk size in bytes")
    metadata: dict[str, Any] | None = Field(None, description="Custom metadata stored on the file document")
    aliases: list[str] | None = Field(None, description="Alternative names for the file")

    @field_validator("filename", "content_type", mode="before")
    @classmethod
    def empty_as_unset(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() == "write":
            return WriteMode.WRITE
        return v

    @classmethod
    def from_value(cls, options: "WriteOptions | Mapping[str, Any] | None") -> "WriteOptions":
        """
        Coerce caller-supplied options into WriteOptions.

        Raises:
            InvalidArgumentError: If options is not a mapping or fails validation
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidArgumentError(f"Write options must be a mapping, not {type(options).__name__}")
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid write options: {e}") from e

    def with_defaults(self, default_filename: str) -> "WriteOptions":
        """Return a copy with the filename filled in."""
        if self.filename:
            return self
        return self.model_copy(update={"filename": default_filename})

    def to_engine_kwargs(self) -> dict[str, Any]:
        """Files-document fields for the storage engine."""
        kwargs: dict[str, Any] = {"filename": self.filename}
        if self.content_type is not None:
            kwargs["contentType"] = self.content_type
        if self.file_id is not None:
            kwargs["_id"] = self.file_id
        if self.chunk_size is not None:
            kwargs["chunkSize"] = self.chunk_size
        if self.metadata is not None:
            kwargs["metadata"] = self.metadata
        if self.aliases is not None:
            kwargs["aliases"] = self.aliases
        return kwargs
