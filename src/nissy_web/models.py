"""Pydantic models for gateway requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class _Body(BaseModel):
    """Raw JSON body fields.

    Fields stay untyped so sanitization sees them as sent: absent or
    non-string values become empty strings there, while present strings are
    checked against the allow-list.
    """

    model_config = ConfigDict(extra="ignore")


class SolveRequest(_Body):
    step: Any = None
    scramble: Any = None
    options: Any = None


class ScrambleRequest(_Body):
    type: Any = None
    count: Any = None


class MoveSequenceRequest(_Body):
    """Body of the single-scramble commands (invert, print, cleanup, unniss)."""

    scramble: Any = None


class Step(BaseModel):
    """A solver step as listed by ``nissy steps``."""

    model_config = ConfigDict(extra="forbid")

    id: str
    description: str


class StepsResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    steps: list[Step]


class ResultResponse(BaseModel):
    """Filtered solver output."""

    model_config = ConfigDict(extra="forbid")

    result: str


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "nissy-web"
