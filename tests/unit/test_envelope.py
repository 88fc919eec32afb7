"""
Unit tests for inbound envelope adapters.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest

from file_sink import HeaderEnvelope, InboundMessage, InfoEnvelope, get_envelope


def test_header_envelope_mapping():
    stream = object()
    msg = HeaderEnvelope().unwrap({"header": {"file_name": "a.csv", "x": 1}, "payload": stream})
    assert msg.file_name == "a.csv"
    assert msg.payload is stream
    assert msg.header == {"file_name": "a.csv", "x": 1}


def test_header_envelope_attributes():
    stream = object()
    message = SimpleNamespace(header={"file_name": "a.csv"}, payload=stream)
    msg = HeaderEnvelope().unwrap(message)
    assert msg.file_name == "a.csv"
    assert msg.payload is stream


def test_info_envelope():
    msg = InfoEnvelope().unwrap({"info": {"file_name": "/abs/a.csv"}})
    assert msg.file_name == "/abs/a.csv"
    assert msg.payload is None


def test_wrong_section_yields_missing_file_name():
    msg = HeaderEnvelope().unwrap({"info": {"file_name": "a.csv"}})
    assert msg.file_name is None


def test_missing_sections_and_none_message():
    assert HeaderEnvelope().unwrap({}).file_name is None
    assert HeaderEnvelope().unwrap(None).file_name is None


def test_pathlike_file_name_coerced():
    msg = HeaderEnvelope().unwrap({"header": {"file_name": Path("/abs/a.csv")}})
    assert msg.file_name == str(Path("/abs/a.csv"))


def test_inbound_message_passes_through():
    original = InboundMessage(file_name="a.csv")
    assert InfoEnvelope().unwrap(original) is original


def test_get_envelope():
    assert isinstance(get_envelope("header"), HeaderEnvelope)
    assert isinstance(get_envelope("info"), InfoEnvelope)
    assert get_envelope("info").name == "info"


def test_get_envelope_unknown():
    with pytest.raises(ValueError, match="Unknown envelope"):
        get_envelope("body")
