"""Pydantic schemas for Gemina requests, responses and workflow results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gemina.core.errors import GeminaError


# ──────────────────────────────────────────────
# Enums
# ──────────────────────────────────────────────
class UploadStatus(int, Enum):
    """Named 2xx answers of the upload endpoints."""
    CREATED = 201
    ALREADY_PROCESSING = 202


class PredictionStatus(int, Enum):
    """Answers of the business document endpoint that keep the poll loop going or end it."""
    READY = 200
    PROCESSING = 202
    NOT_FOUND = 404

    @property
    def is_terminal(self) -> bool:
        return self is PredictionStatus.READY


# ──────────────────────────────────────────────
# Request Models
# ──────────────────────────────────────────────
class SubmissionRequest(BaseModel):
    """Upload body. Carries either inline base64 bytes (``file``) or a remote ``url``, never both."""
    external_id: str
    client_id: str
    use_llm: bool = True
    file: str | None = None
    url: str | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> SubmissionRequest:
        if (self.file is None) == (self.url is None):
            raise ValueError("Exactly one of 'file' or 'url' must be provided")
        return self

    @property
    def is_web(self) -> bool:
        return self.url is not None

    def to_payload(self) -> dict[str, Any]:
        """JSON body with only the populated source key."""
        return self.model_dump(exclude_none=True)


class PollPolicy(BaseModel):
    """How long to keep polling. ``None`` bounds mean poll until a terminal answer."""
    interval: float = Field(default=1.0, ge=0)
    max_attempts: int | None = Field(default=None, ge=1)
    timeout: float | None = Field(default=None, gt=0)

    @property
    def is_bounded(self) -> bool:
        return self.max_attempts is not None or self.timeout is not None


# ──────────────────────────────────────────────
# Response Models
# ──────────────────────────────────────────────
class ApiResult(BaseModel):
    """Outcome of a single API call: the parsed body, or the error describing why it was rejected."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status_code: int
    payload: Any = None
    text: str = ""
    error: GeminaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.payload


class WorkflowResult(BaseModel):
    """Everything a finished upload + poll run produced."""
    external_id: str
    upload: ApiResult
    prediction: ApiResult
    attempts: int = 0
