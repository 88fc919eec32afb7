"""
Streaming copy from a payload stream to a file.

Payload streams come in several shapes; iter_chunks() reduces them all to an
async iterator of chunks so copy_stream() has a single transfer loop.
"""

from __future__ import annotations

import asyncio
import codecs
import inspect
from typing import Any, AsyncIterator, Iterable, Optional, Union

import aiofiles

DEFAULT_CHUNK_SIZE = 64 * 1024

# 1:1 byte mapping for text chunks when no encoding is configured
RAW_ENCODING = "latin-1"

Chunk = Union[bytes, bytearray, memoryview, str]


def is_stream(payload: Any) -> bool:
    """True if ``payload`` has a shape iter_chunks() can drain."""
    if isinstance(payload, (bytes, bytearray, memoryview, str)):
        return False
    return (
        callable(getattr(payload, "read", None))
        or hasattr(payload, "__aiter__")
        or isinstance(payload, Iterable)
    )


async def iter_chunks(payload: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[Chunk]:
    """Yield chunks from ``payload`` until it is exhausted.

    Supported shapes, in lookup order:
        - objects with an async ``read(n)`` (asyncio.StreamReader, aiofiles)
        - objects with a sync ``read(n)`` (open files, io.BytesIO), read in a
          worker thread so the event loop is never blocked
        - async iterables of chunks
        - sync iterables of chunks (lists, generators)
    """
    if isinstance(payload, (bytes, bytearray, memoryview, str)):
        raise TypeError(f"Payload must be a stream, not {type(payload).__name__}")

    read = getattr(payload, "read", None)
    if callable(read):
        is_async = inspect.iscoroutinefunction(read)
        while True:
            if is_async:
                chunk = await read(chunk_size)
            else:
                chunk = await asyncio.to_thread(read, chunk_size)
            if not chunk:
                return
            yield chunk

    if hasattr(payload, "__aiter__"):
        async for chunk in payload:
            yield chunk
        return

    if isinstance(payload, Iterable):
        for chunk in payload:
            yield chunk
        return

    raise TypeError(f"Payload of type {type(payload).__name__} is not a readable stream")


def _to_bytes(chunk: Chunk, encoding: str) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode(encoding)
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    raise TypeError(f"Unsupported chunk type {type(chunk).__name__}")


async def copy_stream(
    payload: Any,
    path: str,
    encoding: Optional[str] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Write every chunk of ``payload`` to ``path``; returns bytes written.

    The target is created or truncated. Byte chunks are written verbatim,
    text chunks are encoded with ``encoding`` (raw latin-1 when unset).
    Partially written files are left in place on failure.
    """
    text_encoding = codecs.lookup(encoding).name if encoding else RAW_ENCODING

    written = 0
    async with aiofiles.open(path, "wb") as out:
        async for chunk in iter_chunks(payload, chunk_size):
            data = _to_bytes(chunk, text_encoding)
            await out.write(data)
            written += len(data)
    return written
