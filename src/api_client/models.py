"""Request option and configuration types."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthScope(str, Enum):
    """Partition deciding which cached transport and header policy apply."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"

    @classmethod
    def from_flag(cls, allow_anonymous: Optional[bool]) -> "AuthScope":
        """Map an ``allow_anonymous`` flag to its scope. ``None`` means False."""
        return cls.ANONYMOUS if allow_anonymous else cls.AUTHENTICATED


class ClientConfig(BaseModel):
    """Process-wide configuration fixed by ``ApiClient.initialize``."""

    model_config = ConfigDict(frozen=True)

    base_address: str
    request_response_logging: bool = False

    @field_validator("base_address")
    @classmethod
    def _require_base_address(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_address must not be empty")
        return value


class RequestOptions(BaseModel):
    """Options for a single request.

    Instances are immutable; build a new one per call.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    uri: str
    body: Any = None
    allow_anonymous: Optional[bool] = False
    log_request: bool = False
    log_response: bool = False

    @field_validator("uri")
    @classmethod
    def _require_uri(cls, value: str) -> str:
        if not value:
            raise ValueError("uri must not be empty")
        return value

    @property
    def scope(self) -> AuthScope:
        """Scope this request is sent under."""
        return AuthScope.from_flag(self.allow_anonymous)


class UploadOptions(RequestOptions):
    """Options for a multipart file upload.

    ``stream`` stays owned by the caller and must remain readable until the
    upload returns. ``body``, when set, is sent as a second ``json`` part.
    """

    stream: Any = Field(repr=False)
    file_name: str

    @field_validator("file_name")
    @classmethod
    def _require_file_name(cls, value: str) -> str:
        if not value:
            raise ValueError("file_name must not be empty")
        return value
