# -*- coding: utf-8 -*-

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional

from ..utils.clients import Transport
from ..utils.misc import mask_path
from .files import read_batch_file
from .jobs import (
    abort_job,
    close_job,
    get_batch_info,
    get_batch_request,
    get_job_info,
    list_batches,
    submit_batch,
)
from .models import Batch, ContentType, Job, Result
from .polling import DEFAULT_NUMBER_OF_TRIES, DEFAULT_WAIT_TIME, get_batch_result


class BatchOperator:
    """
    Handle on an existing bulk API job.

    Exposes every operation on the job: submitting batches from memory or
    from files, reading job and batch information, closing or aborting the
    job, and waiting for batch results.

    Attributes:
        transport: Transport used for all API calls.
        job_id (str): The ID of the job.
        content_type (ContentType): Content type of the job's records.
    """

    def __init__(
        self,
        transport: Transport,
        job_id: str,
        content_type: ContentType | str = ContentType.XML,
        sleep: Optional[Callable[[float], object]] = None
    ):
        if not job_id:
            raise ValueError("job_id must be a non-empty string.")
        self.transport = transport
        self.job_id = job_id
        self.content_type = ContentType(content_type)
        self._sleep = sleep

    def __repr__(self):
        return f"BatchOperator(job_id={self.job_id!r}, content_type={self.content_type.value})"

    def submit(self, payload: str) -> Batch:
        """Create a batch from an in-memory document."""
        return submit_batch(self.transport, self.job_id, payload, self.content_type)

    def submit_file(self, file_path: str | Path, encoding: str = "utf-8") -> Batch:
        """
        Create a batch from the content of a file.

        Args:
            file_path (str | Path): Path to a file whose extension matches
                the job content type ('.xml' or '.csv').
            encoding (str): Text encoding of the file.

        Raises:
            InvalidFileTypeError: If the extension does not match; the file is not opened.
            FileReadError: If the file cannot be read.
        """
        payload = read_batch_file(file_path, self.content_type, encoding=encoding)
        logging.info(f"Read {len(payload)} characters from {mask_path(file_path)}")
        return self.submit(payload)

    def get_job_info(self) -> Job:
        return get_job_info(self.transport, self.job_id)

    def close_job(self) -> Job:
        return close_job(self.transport, self.job_id)

    def abort_job(self) -> Job:
        return abort_job(self.transport, self.job_id)

    def get_batch_info(self, batch_id: str) -> Batch:
        return get_batch_info(self.transport, self.job_id, batch_id)

    def get_all_batches(self) -> List[Batch]:
        """Return all batches of the job in server order."""
        return list_batches(self.transport, self.job_id)

    def get_batch_request(self, batch_id: str) -> str:
        """Return the original document submitted for a batch."""
        return get_batch_request(self.transport, self.job_id, batch_id)

    def get_result(
            self,
            batch_id: str,
            number_of_tries: int = DEFAULT_NUMBER_OF_TRIES,
            wait_time: float = DEFAULT_WAIT_TIME,
            cancel_event: Optional[threading.Event] = None
        ) -> List[Result]:
        """
        Wait for a batch to reach a terminal state and return its results.

        Args:
            batch_id (str): The ID of the batch.
            number_of_tries (int): Maximum number of wait-then-check cycles.
            wait_time (float): Milliseconds to wait before each check.
            cancel_event (threading.Event): Optional cancellation token; when
                set, polling stops with PollCancelledError.

        Returns:
            list[Result]: Per-record results of the batch.

        Raises:
            PollExhaustedError: If the batch is still pending after all tries.
            PollCancelledError: If polling was cancelled.
            TransportError: If any API call fails.
        """
        return get_batch_result(
            self.transport, self.job_id, batch_id,
            number_of_tries=number_of_tries,
            wait_time=wait_time,
            content_type=self.content_type,
            sleep=self._sleep,
            cancel_event=cancel_event,
        )
