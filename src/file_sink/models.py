"""
Data models for the file sink stage.

StageConfig is frozen: it is read by every in-flight write and never mutated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorKind(str, Enum):
    """Taxonomy of terminal failures (used as ErrorReport.short_message)."""

    MISSING_FILE_NAME = "MissingFileName"
    RELATIVE_PATH_WITHOUT_DIRECTORY = "RelativePathWithoutDirectory"
    MISSING_PAYLOAD = "MissingPayload"
    TRANSFER_FAILURE = "TransferFailure"
    CONSTRUCTION_FAILURE = "ConstructionFailure"


class StageConfig(BaseModel):
    """Stage configuration, fixed at construction."""

    model_config = ConfigDict(frozen=True)

    directory: Optional[str] = None
    encoding: Optional[str] = None

    @field_validator("directory", "encoding", mode="before")
    @classmethod
    def _empty_is_unset(cls, v):
        if not v:
            return None
        return os.fspath(v) if isinstance(v, os.PathLike) else v


class InboundMessage(BaseModel):
    """One write request, already unwrapped from the host envelope."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_name: Optional[str] = None
    payload: Optional[Any] = None
    header: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class ErrorReport:
    """Structured failure record emitted once per rejected message.

    Attributes:
        message: The inbound message as delivered by the host
        short_message: Taxonomy string identifying the failure
        endpoint: Name of the inbound endpoint that received the message
        stage: Name of the reporting stage
        detail: Human readable description
    """

    message: Any
    short_message: ErrorKind
    endpoint: str
    stage: str = ""
    detail: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "short_message": self.short_message.value,
            "endpoint": self.endpoint,
            "stage": self.stage,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class WriteResult:
    path: str
    bytes_written: int
    duration: float


@dataclass(frozen=True)
class StageHealth:
    name: str
    running: bool
    in_flight: int
    directory: Optional[str]
    encoding: Optional[str]
