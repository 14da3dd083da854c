# gridfile/registry/callbacks.py
"""
Callback adapter for callers that expect (error, *values) callbacks.

Registry operations return their result through the awaitable; this
adapter additionally reports it to a callback, exactly once per call:

    record = await with_callback(registry.read("a.txt"), on_done)
    # on_done(None, record, record.stream) on success
    # on_done(error) on failure, after which the error is re-raised
"""

from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

from gridfile.storage.base import FileRecord

T = TypeVar("T")

Callback = Callable[..., Any]


def _callback_values(result: Any) -> tuple:
    if result is None:
        return ()
    if isinstance(result, FileRecord) and result.stream is not None:
        return (result, result.stream)
    return (result,)


async def with_callback(operation: Awaitable[T], callback: Optional[Callback] = None) -> T:
    """
    Await a registry operation and report its outcome to callback.

    Args:
        operation: Awaitable returned by write/read/remove
        callback: Called as callback(None, *values) or callback(error)

    Returns:
        The operation's result

    Raises:
        Exception: Whatever the operation raised, after the callback saw it.
            If the callback itself raises while handling that error, its
            exception propagates with the operation error as __cause__.
    """
    try:
        result = await operation
    except Exception as e:
        if callback is not None:
            try:
                callback(e)
            except Exception as callback_error:
                raise callback_error from e
        raise

    if callback is not None:
        callback(None, *_callback_values(result))
    return result
