"""Errors raised by the library and rendering of their cause chains."""

from __future__ import annotations

from typing import TextIO


class RetdecError(Exception):
    """Base class of every error raised by the library."""


class ConfigError(RetdecError):
    pass


class TransportError(RetdecError):
    pass


class DecodeError(RetdecError):
    pass


class InvalidResponseError(RetdecError):
    pass


class MissingInputError(RetdecError):
    pass


class RequestFailed(RetdecError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RequestFailed):
    pass


class ResourceNotSucceeded(RetdecError):
    pass


class NotAFileError(RetdecError):
    pass


class LocalFileError(RetdecError):
    pass


def error_chain(exc: BaseException) -> list[BaseException]:
    """Return ``exc`` followed by its explicit causes, outermost first."""
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return chain


def format_error(exc: BaseException) -> str:
    errors = error_chain(exc)
    lines = [f"error: {errors[0]}"]
    lines.extend(f"  caused by: {cause}" for cause in errors[1:])
    return "\n".join(lines) + "\n"


def print_error(exc: BaseException, stream: TextIO) -> None:
    stream.write(format_error(exc))
