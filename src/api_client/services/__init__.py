"""Services module."""

from .request_logger import RequestLogger
from .serialization import to_json_bytes

__all__ = ["RequestLogger", "to_json_bytes"]
