"""
Failure types for parsing and executing commands.

Parsers report failures as values (ParseOutcome holding a ParseFailure) so
every failure path is visible to the caller; ``ParseOutcome.unwrap`` turns a
failure into a ParseException for callers that prefer exceptions.
"""

import typing

from dataclasses import dataclass
from enum import Enum, auto

T = typing.TypeVar("T")

MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{usage}"
MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_DUPLICATE_FIELDS = "Multiple values specified for the following single-valued field(s): {prefixes}"


class ParseErrorKind(Enum):
    MISSING_FIELD = auto()
    INVALID_FORMAT = auto()
    LENGTH_EXCEEDED = auto()
    DUPLICATE_PREFIX = auto()
    UNKNOWN_COMMAND = auto()


@dataclass(frozen=True)
class ParseFailure:
    kind: ParseErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


class ParseException(ValueError):
    """
    Raised by ``ParseOutcome.unwrap`` when the outcome is a failure.
    """

    def __init__(self, failure: ParseFailure):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> ParseErrorKind:
        return self.failure.kind


@dataclass(frozen=True)
class ParseOutcome(typing.Generic[T]):
    """
    Either a parsed command or the reason parsing failed, never both.
    """

    command: typing.Optional[T] = None
    failure: typing.Optional[ParseFailure] = None

    @classmethod
    def success(cls, command: T) -> "ParseOutcome[T]":
        return cls(command=command)

    @classmethod
    def fail(cls, kind: ParseErrorKind, message: str) -> "ParseOutcome[T]":
        return cls(failure=ParseFailure(kind, message))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        if self.failure is not None:
            raise ParseException(self.failure)
        return self.command


class CommandError(ValueError):
    """
    A parsed command could not be applied to the patient book. The book is left unchanged.
    """
