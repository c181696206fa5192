"""
Result types returned by PixEdit collaborators.

Collaborators (file dialogs, codec, clipboard, screen capture) never raise
into the editor. They return an OperationResult whose status tells the
caller how to react:

- OK: value holds the payload
- CANCELLED: the user dismissed a dialog or a capture; silently ignored
- UNAVAILABLE: nothing to work with (empty clipboard, no screen); status only
- INVALID_GEOMETRY: crop/resize rejected; silently ignored
- DECODE_FAILURE: image bytes could not be decoded; reported to the user
- FAILED: any other collaborator error; reported to the user
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


class ResultStatus(Enum):
    """Outcome of a collaborator or editor operation."""
    OK = auto()
    CANCELLED = auto()
    UNAVAILABLE = auto()
    INVALID_GEOMETRY = auto()
    DECODE_FAILURE = auto()
    FAILED = auto()


class DecodeError(Exception):
    """Raised by the codec helpers when bytes are not a readable image."""


@dataclass(frozen=True)
class OperationResult:
    """Result object carrying a status, an optional payload and a message."""
    status: ResultStatus
    value: Any = None
    message: str = ""
    path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def is_error(self) -> bool:
        """True for outcomes that must be reported to the user."""
        return self.status in (ResultStatus.FAILED, ResultStatus.DECODE_FAILURE)

    @classmethod
    def success(cls, value: Any = None, path: Optional[str] = None) -> "OperationResult":
        return cls(ResultStatus.OK, value=value, path=path)

    @classmethod
    def cancelled(cls) -> "OperationResult":
        return cls(ResultStatus.CANCELLED)

    @classmethod
    def unavailable(cls, message: str) -> "OperationResult":
        return cls(ResultStatus.UNAVAILABLE, message=message)

    @classmethod
    def invalid_geometry(cls, message: str) -> "OperationResult":
        return cls(ResultStatus.INVALID_GEOMETRY, message=message)

    @classmethod
    def decode_failure(cls, message: str) -> "OperationResult":
        return cls(ResultStatus.DECODE_FAILURE, message=message)

    @classmethod
    def failure(cls, message: str) -> "OperationResult":
        return cls(ResultStatus.FAILED, message=message)
