"""
Pytest configuration and fixtures for file-sink-stage.

Provides cross-platform event loop configuration and payload helpers.
"""

import asyncio
import io
import sys

import pytest

# Set policy *before* pytest-asyncio creates any loops
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


CSV_BYTES = b"id,name\n1,alpha\n2,beta\n3,gamma\n"


@pytest.fixture
def out_dir(tmp_path):
    """Existing destination directory (the stage never creates directories)."""
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def csv_bytes():
    return CSV_BYTES


@pytest.fixture
def csv_file(tmp_path):
    """Source fixture file on disk."""
    p = tmp_path / "existing_file.csv"
    p.write_bytes(CSV_BYTES)
    return p


@pytest.fixture
def payload():
    """Fresh in-memory payload stream."""
    return io.BytesIO(CSV_BYTES)


@pytest.fixture
def collected_reports():
    """List plus subscriber callback collecting ErrorReports."""
    reports = []

    def _collect(report):
        reports.append(report)

    return reports, _collect
