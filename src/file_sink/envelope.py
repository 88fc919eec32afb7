"""
Inbound envelope adapters.

Hosts deliver messages in different shapes (``header.file_name`` or
``info.file_name``). The shape is chosen per stage; the core only ever sees
an InboundMessage.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Protocol

from .models import InboundMessage


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class Envelope(Protocol):
    """Protocol for objects that unwrap host messages."""

    name: str

    def unwrap(self, message: Any) -> InboundMessage:
        ...


class _MetadataEnvelope:
    """Reads ``file_name`` from a metadata section named by ``section``."""

    section = "header"

    @property
    def name(self) -> str:
        return self.section

    def unwrap(self, message: Any) -> InboundMessage:
        if isinstance(message, InboundMessage):
            return message

        meta = _field(message, self.section) or {}
        file_name = _field(meta, "file_name")
        if isinstance(file_name, os.PathLike):
            file_name = os.fspath(file_name)
        elif file_name is not None and not isinstance(file_name, str):
            file_name = str(file_name)

        return InboundMessage(
            file_name=file_name,
            payload=_field(message, "payload"),
            header=dict(meta) if isinstance(meta, Mapping) else {},
        )


class HeaderEnvelope(_MetadataEnvelope):
    section = "header"


class InfoEnvelope(_MetadataEnvelope):
    section = "info"


ENVELOPES: dict[str, type[_MetadataEnvelope]] = {
    "header": HeaderEnvelope,
    "info": InfoEnvelope,
}


def get_envelope(name: str) -> Envelope:
    try:
        return ENVELOPES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown envelope {name!r}. Must be one of {sorted(ENVELOPES)}"
        ) from None
