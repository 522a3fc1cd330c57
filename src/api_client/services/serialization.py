"""JSON encoding of request bodies."""

import json
from typing import Any

from pydantic import BaseModel

from ..errors import SerializationError

JSON_CONTENT_TYPE = "application/json"


def to_json_bytes(value: Any) -> bytes:
    """Encode a request body as UTF-8 JSON.

    Pydantic models are dumped in JSON mode first so datetimes, UUIDs and
    enums come out as their wire forms.
    """
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        return json.dumps(value, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Request body is not JSON serializable: {e}") from e
