"""
File Sink Stage

Terminal pipeline stage that writes inbound payload streams to files under a
configured path policy.

Usage:
    from file_sink import FileSinkStage

    async with FileSinkStage("archive", {"directory": "/data/out"}) as stage:
        result = await stage.receive({"header": {"file_name": "a.csv"}, "payload": stream})

    # fire-and-forget; failures arrive on stage.reports
    stage.dispatch(message)
"""

from .errors import (
    ConstructionFailure,
    FileSinkError,
    MissingFileName,
    MissingPayload,
    RelativePathWithoutDirectory,
    TransferFailure,
)
from .envelope import HeaderEnvelope, InfoEnvelope, get_envelope
from .models import ErrorKind, ErrorReport, InboundMessage, StageConfig, StageHealth, WriteResult
from .paths import resolve_destination
from .reports import ErrorReportBus
from .stage import FileSinkStage

__version__ = "1.0.0"
__all__ = [
    # stage
    "FileSinkStage",
    "resolve_destination",
    # models
    "StageConfig",
    "InboundMessage",
    "ErrorKind",
    "ErrorReport",
    "WriteResult",
    "StageHealth",
    # envelopes
    "HeaderEnvelope",
    "InfoEnvelope",
    "get_envelope",
    # reporting
    "ErrorReportBus",
    # errors
    "FileSinkError",
    "MissingFileName",
    "RelativePathWithoutDirectory",
    "MissingPayload",
    "TransferFailure",
    "ConstructionFailure",
]
