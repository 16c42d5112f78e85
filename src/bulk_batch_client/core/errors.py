# -*- coding: utf-8 -*-

"""
Exception hierarchy for the bulk batch client.

Every public operation either returns its typed value or raises one of the
exceptions below. None of them is fatal to the process: callers decide
whether to retry, abort the job or surface the error to their own caller.
"""

from pathlib import Path
from typing import Optional, Sequence


class BulkClientError(Exception):
    """Base class for all errors raised by the bulk batch client."""


class TransportError(BulkClientError):
    """
    Network or HTTP level failure reported by the transport.

    Attributes:
        status_code: HTTP status code, None when no response was received.
        exception_code: API exception code decoded from the error body, if any.
        path: Resource path segments of the failed call.
    """

    def __init__(
            self,
            message: str,
            status_code: Optional[int] = None,
            exception_code: Optional[str] = None,
            path: Sequence[str] = ()
        ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.exception_code = exception_code
        self.path = tuple(path)

    def __str__(self):
        details = []
        if self.status_code is not None:
            details.append(f"HTTP {self.status_code}")
        if self.exception_code:
            details.append(self.exception_code)
        prefix = f"[{', '.join(details)}] " if details else ""
        return f"{prefix}{self.message}"


class DecodeError(BulkClientError):
    """A response body could not be decoded into the expected document."""

    def __init__(self, kind: str, reason: str):
        super().__init__(f"Cannot decode {kind}: {reason}")
        self.kind = kind
        self.reason = reason


class InvalidFileTypeError(BulkClientError):
    """The upload file extension does not match the job content type."""

    def __init__(self, path: str | Path, expected_extension: str):
        super().__init__(
            f"Invalid file type for {path}: expected a '{expected_extension}' file"
        )
        self.path = Path(path)
        self.expected_extension = expected_extension


class FileReadError(BulkClientError):
    """A local upload file could not be opened or read."""

    def __init__(self, path: str | Path, cause: BaseException):
        super().__init__(f"Cannot read batch file {path}: {cause}")
        self.path = Path(path)
        self.cause = cause


class PollExhaustedError(BulkClientError):
    """The batch did not reach a terminal state within the allotted retries."""

    def __init__(self, batch_id: str, attempts: int):
        super().__init__(
            f"Batch {batch_id} not completed within allotted retries "
            f"({attempts} attempts)"
        )
        self.batch_id = batch_id
        self.attempts = attempts


class PollCancelledError(BulkClientError):
    """Polling was cancelled before the batch reached a terminal state."""

    def __init__(self, batch_id: str, attempts: int):
        super().__init__(
            f"Polling for batch {batch_id} cancelled after {attempts} attempts"
        )
        self.batch_id = batch_id
        self.attempts = attempts
