"""Tests for JSON body encoding."""

from uuid import UUID

import pytest
from pydantic import BaseModel

from api_client.errors import SerializationError
from api_client.services.serialization import to_json_bytes


class _Item(BaseModel):
    id: UUID
    name: str


def test_plain_values_encode_as_utf8_json():
    assert to_json_bytes({"name": "café"}) == '{"name": "café"}'.encode("utf-8")
    assert to_json_bytes([1, 2]) == b"[1, 2]"


def test_pydantic_models_use_json_mode():
    item = _Item(id=UUID("12345678-1234-5678-1234-567812345678"), name="x")

    assert to_json_bytes(item) == b'{"id": "12345678-1234-5678-1234-567812345678", "name": "x"}'


def test_unserializable_value_raises_serialization_error():
    with pytest.raises(SerializationError):
        to_json_bytes({"bad": {1, 2}})
