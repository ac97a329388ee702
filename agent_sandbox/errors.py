# agent_sandbox/errors.py
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    PATH_TRAVERSAL = "PathTraversal"
    DANGEROUS_METACHARACTER = "DangerousMetacharacter"
    COMMAND_NOT_ALLOWED = "CommandNotAllowed"
    UNCLOSED_QUOTE = "UnclosedQuote"
    VALIDATION_FAILED = "ValidationFailed"
    USER_DECLINED = "UserDeclined"
    EXECUTION_FAILED = "ExecutionFailed"
    IO_ERROR = "IOError"


class ToolError(Exception):
    """Base class for every failure a tool operation can report."""
    kind: ErrorKind = ErrorKind.EXECUTION_FAILED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ToolError):
    kind = ErrorKind.INVALID_INPUT


class PathTraversalError(ToolError):
    kind = ErrorKind.PATH_TRAVERSAL


class DangerousMetacharacterError(ToolError):
    kind = ErrorKind.DANGEROUS_METACHARACTER


class CommandNotAllowedError(ToolError):
    kind = ErrorKind.COMMAND_NOT_ALLOWED


class UnclosedQuoteError(ToolError):
    kind = ErrorKind.UNCLOSED_QUOTE


class ValidationFailedError(ToolError):
    kind = ErrorKind.VALIDATION_FAILED


class UserDeclinedError(ToolError):
    kind = ErrorKind.USER_DECLINED


class ExecutionFailedError(ToolError):
    kind = ErrorKind.EXECUTION_FAILED


class FileIOError(ToolError):
    kind = ErrorKind.IO_ERROR


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a value or a ToolError.
    Validators and parsers return these instead of raising; the executor
    unwraps them inside its own try block.
    """
    value: Optional[T] = None
    error: Optional[ToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ToolError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
