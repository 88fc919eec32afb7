"""
Custom exceptions for the file sink stage.

Every rejected message maps to exactly one exception carrying the
ErrorReport that was emitted for it.
"""

from __future__ import annotations

from typing import Optional

from .models import ErrorKind, ErrorReport


class FileSinkError(Exception):
    """Base error for the file sink stage."""

    kind: ErrorKind = ErrorKind.TRANSFER_FAILURE

    def __init__(self, detail: str, report: Optional[ErrorReport] = None):
        super().__init__(detail)
        self.detail = detail
        self.report = report


class MissingFileName(FileSinkError):
    """The message carries no file name."""

    kind = ErrorKind.MISSING_FILE_NAME


class RelativePathWithoutDirectory(FileSinkError):
    """Relative file name and no base directory to resolve it against."""

    kind = ErrorKind.RELATIVE_PATH_WITHOUT_DIRECTORY


class MissingPayload(FileSinkError):
    """The message has no readable payload stream."""

    kind = ErrorKind.MISSING_PAYLOAD


class TransferFailure(FileSinkError):
    """Streaming copy failed (source read or destination write)."""

    kind = ErrorKind.TRANSFER_FAILURE


class ConstructionFailure(FileSinkError):
    """Stage instantiated without a configuration object."""

    kind = ErrorKind.CONSTRUCTION_FAILURE


def map_transfer_error(e: Exception, path: str) -> TransferFailure:
    if isinstance(e, FileNotFoundError):
        return TransferFailure(f"Destination directory does not exist: {path}")
    if isinstance(e, IsADirectoryError):
        return TransferFailure(f"Destination is a directory: {path}")
    if isinstance(e, PermissionError):
        return TransferFailure(f"Permission denied writing {path}")
    if type(e) is LookupError:  # codecs.lookup failure
        return TransferFailure(f"Unknown encoding while writing {path}: {e}")
    if isinstance(e, UnicodeError):
        return TransferFailure(f"Cannot encode payload for {path}: {e}")
    return TransferFailure(f"Transfer to {path} failed: {type(e).__name__}: {e}")
