# gridfile/constants.py
"""
Centralized constants for the file registry.

Error messages are kept verbatim so callers matching on them keep working.
"""


class ErrorMessages:
    """User-facing error messages raised by the registry."""

    INVALID_SELECTOR = "Invalid query selector! It must be either a valid ObjectId or a filename."
    INVALID_SOURCE = "Source can only be a readable stream, bytes or a path string!"
    NOT_FOUND = "Not Found!"
    NO_MATCH = "No match!"
    NOT_INITIALIZED = "File registry is not initialized. Call initialize(database, driver) first."


class GridDefaults:
    """Default values for GridFS writes and reads."""

    FILENAME = "unnamed_file"
    BUCKET = "fs"

    # Same as gridfs.DEFAULT_CHUNK_SIZE (255 KiB)
    CHUNK_SIZE = 255 * 1024

    # Block size used when piping sources into the engine and iterating reads
    READ_BLOCK_SIZE = 255 * 1024
