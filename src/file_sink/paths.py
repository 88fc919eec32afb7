"""
Destination path policy.

When a base directory is configured it is the only authority for location:
absolute names coming from upstream keep just their base name. Without a
base directory only absolute names are accepted.
"""

from __future__ import annotations

import os
from typing import Optional

from .errors import MissingFileName, RelativePathWithoutDirectory

MISSING_FILE_NAME_TEXT = "No 'file_name' property in the header"
RELATIVE_PATH_TEXT = (
    "If there is no directory in the step configuration, then the file names must be absolute"
)


def resolve_destination(directory: Optional[str], file_name: Optional[str]) -> str:
    """Compute the absolute write target for ``file_name``.

    Args:
        directory: Configured base directory, or None when unset
        file_name: File name from the inbound message

    Returns:
        The destination path

    Raises:
        MissingFileName: ``file_name`` is missing or empty
        RelativePathWithoutDirectory: ``file_name`` is relative and no
            directory is configured
    """
    if not file_name:
        raise MissingFileName(MISSING_FILE_NAME_TEXT)

    if directory:
        if os.path.isabs(file_name):
            return os.path.join(directory, os.path.basename(file_name.rstrip(os.sep)))
        return os.path.join(directory, file_name)

    if os.path.isabs(file_name):
        return file_name
    raise RelativePathWithoutDirectory(RELATIVE_PATH_TEXT)
