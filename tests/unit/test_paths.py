"""
Unit tests for the destination path policy.
"""

import os

import pytest

from file_sink import MissingFileName, RelativePathWithoutDirectory, resolve_destination


def test_no_directory_absolute_name_used_verbatim():
    assert resolve_destination(None, "/tmp/data/a.csv") == "/tmp/data/a.csv"


def test_no_directory_relative_name_rejected():
    with pytest.raises(RelativePathWithoutDirectory, match="must be absolute"):
        resolve_destination(None, "a.csv")


def test_no_directory_nested_relative_name_rejected():
    with pytest.raises(RelativePathWithoutDirectory):
        resolve_destination(None, "sub/a.csv")


def test_directory_absolute_name_keeps_basename_only():
    """Directory component of an absolute name is discarded."""
    assert resolve_destination("/out", "/tmp/a.csv") == os.path.join("/out", "a.csv")


def test_directory_absolute_name_inside_directory():
    """Already inside the directory: result is still directory + basename."""
    assert resolve_destination("/out", "/out/nested/a.csv") == os.path.join("/out", "a.csv")


def test_directory_relative_name_joined():
    assert resolve_destination("/out", "a.csv") == os.path.join("/out", "a.csv")
    assert resolve_destination("/out", "sub/a.csv") == os.path.join("/out", "sub/a.csv")


def test_relative_directory_accepted():
    """Directory is not validated: a relative base is joined as-is."""
    assert resolve_destination("path/to/nowhere", "a.csv") == os.path.join(
        "path/to/nowhere", "a.csv"
    )


@pytest.mark.parametrize("directory", [None, "/out"])
@pytest.mark.parametrize("file_name", [None, ""])
def test_missing_file_name(directory, file_name):
    with pytest.raises(MissingFileName, match="file_name"):
        resolve_destination(directory, file_name)


def test_directory_absolute_name_with_trailing_separator():
    """Trailing separator does not empty the base name."""
    assert resolve_destination("/out", "/tmp/a.csv/") == os.path.join("/out", "a.csv")
