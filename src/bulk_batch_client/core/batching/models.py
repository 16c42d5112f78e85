# -*- coding: utf-8 -*-

"""
Value objects for jobs, batches and per-record results.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Optional


class ContentType(str, Enum):
    """Content type of the records uploaded to a job."""
    XML = "XML"
    CSV = "CSV"

    @property
    def file_extension(self) -> str:
        return f".{self.value.lower()}"

    @property
    def media_type(self) -> str:
        if self is ContentType.CSV:
            return "text/csv; charset=UTF-8"
        return "application/xml; charset=UTF-8"


class JobState(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"
    ABORTED = "Aborted"
    FAILED = "Failed"


class BatchState(str, Enum):
    """Server-side batch lifecycle states."""
    QUEUED = "Queued"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"
    NOT_PROCESSED = "Not Processed"

    @property
    def is_terminal(self) -> bool:
        """True when the server will not process the batch any further."""
        return self in (
            BatchState.COMPLETED,
            BatchState.FAILED,
            BatchState.NOT_PROCESSED,
        )


@dataclass(frozen=True)
class Job:
    id: str
    state: JobState
    object: Optional[str] = None
    operation: Optional[str] = None
    content_type: Optional[ContentType] = None
    concurrency_mode: Optional[str] = None
    created_by_id: Optional[str] = None
    created_date: Optional[datetime] = None
    system_modstamp: Optional[datetime] = None
    api_version: Optional[str] = None
    number_batches_queued: int = 0
    number_batches_in_progress: int = 0
    number_batches_completed: int = 0
    number_batches_failed: int = 0
    number_batches_total: int = 0
    number_records_processed: int = 0
    number_records_failed: int = 0
    number_retries: int = 0
    total_processing_time: int = 0
    api_active_processing_time: int = 0
    apex_processing_time: int = 0

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class Batch:
    id: str
    job_id: str
    state: BatchState
    state_message: Optional[str] = None
    created_date: Optional[datetime] = None
    system_modstamp: Optional[datetime] = None
    number_records_processed: int = 0
    number_records_failed: int = 0
    total_processing_time: int = 0
    api_active_processing_time: int = 0
    apex_processing_time: int = 0

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class Result:
    """Outcome of a single submitted record."""
    success: bool
    id: Optional[str] = None
    created: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def _jsonable(data: dict) -> dict:
    """Convert enums and datetimes so the dict can be dumped as JSON."""
    converted = {}
    for key, value in data.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        converted[key] = value
    return converted
