"""
Result<T, E> model for engine and validation failures.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Categorizes scheme compilation failures."""
    VALIDATION_ERROR = "ValidationError"
    ENGINE_REJECTED = "EngineRejected"
    FATAL_IO = "FatalIO"


class EngineError(BaseModel):
    """Rich error context for a failed declaration or engine call."""
    kind: ErrorKind
    message: str
    code: Optional[int] = None
    operation: Optional[str] = None

    def __str__(self):
        result = self.kind.value
        if self.operation:
            result = result + " in " + self.operation
        if self.code is not None:
            result = result + " (status " + str(self.code) + ")"
        return result + ": " + self.message


class Result:
    """Base class for Result<T, E> (Ok or Err)."""

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self):
        """Get value or raise error."""
        if isinstance(self, Ok):
            return self.value
        else:
            raise RuntimeError(f"Called unwrap() on Err: {self.error.message}")

    def unwrap_or(self, default):
        """Get value or return default."""
        if isinstance(self, Ok):
            return self.value
        else:
            return default


class Ok(Result):
    """Success case: Ok<T>."""

    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return f"Ok({self.value!r})"


class Err(Result):
    """Error case: Err<EngineError>."""

    def __init__(self, error: EngineError):
        self.error = error

    def __repr__(self):
        return f"Err({self.error!r})"

    def __str__(self):
        return str(self.error)
