# -*- coding: utf-8 -*-
"""
Batch result polling.

`get_batch_result` waits for a batch to reach a terminal state with a
bounded number of wait-then-check cycles, then fetches its results. The
worst-case latency before giving up is `number_of_tries * wait_time`.

Every cycle sleeps *before* checking, including the first one. A transport
error during a check is not retried here. A batch in the Failed state still
yields its per-record results.
"""


import logging
import threading
import time
from typing import Callable, List, Optional

from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt

from ..errors import PollCancelledError, PollExhaustedError
from ..utils.clients import Transport
from .jobs import get_batch_info, get_batch_results
from .models import Batch, BatchState, ContentType, Result

DEFAULT_NUMBER_OF_TRIES = 1
DEFAULT_WAIT_TIME = 3000  # milliseconds


def _is_pending(batch: Batch) -> bool:
    return not batch.state.is_terminal


def _validate_poll_arguments(number_of_tries: int, wait_time: float):
    if number_of_tries < 1:
        raise ValueError(f"number_of_tries must be >= 1, got {number_of_tries}")
    if wait_time < 0:
        raise ValueError(f"wait_time must be >= 0, got {wait_time}")


def wait_for_batch(
        transport: Transport,
        job_id: str,
        batch_id: str,
        number_of_tries: int = DEFAULT_NUMBER_OF_TRIES,
        wait_time: float = DEFAULT_WAIT_TIME,
        sleep: Optional[Callable[[float], object]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> Batch:
    """
    Poll a batch until it reaches a terminal state.

    Args:
        transport: Transport used for the API calls.
        job_id (str): The ID of the job.
        batch_id (str): The ID of the batch.
        number_of_tries (int): Maximum number of state checks (>= 1).
        wait_time (float): Milliseconds to wait before each check (>= 0).
        sleep (callable): Sleep function taking seconds. Defaults to
            `time.sleep`, or to `cancel_event.wait` when an event is given so
            cancellation interrupts the wait.
        cancel_event (threading.Event): Optional cancellation token.

    Returns:
        Batch: The batch in its terminal state.

    Raises:
        PollExhaustedError: If the batch is still pending after `number_of_tries` checks.
        PollCancelledError: If `cancel_event` is set while polling.
        TransportError: If a state check fails; no further checks are made.
    """
    _validate_poll_arguments(number_of_tries, wait_time)
    if sleep is None:
        sleep = cancel_event.wait if cancel_event is not None else time.sleep
    wait_seconds = wait_time / 1000

    attempts = 0

    def check() -> Batch:
        nonlocal attempts
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(batch_id, attempts)
        sleep(wait_seconds)
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(batch_id, attempts)
        attempts += 1
        batch = get_batch_info(transport, job_id, batch_id)
        logging.debug(
            f"Poll {attempts}/{number_of_tries} for batch {batch_id}: {batch.state.value}"
        )
        return batch

    retrying = Retrying(
        stop=stop_after_attempt(number_of_tries),
        retry=retry_if_result(_is_pending),
    )
    try:
        batch = retrying(check)
    except RetryError:
        logging.error(
            f"Batch {batch_id} not completed after {attempts} checks "
            f"({wait_time} ms apart)."
        )
        raise PollExhaustedError(batch_id, attempts) from None

    logging.info(f"Batch {batch_id} reached state {batch.state.value} after {attempts} checks.")
    return batch


def get_batch_result(
        transport: Transport,
        job_id: str,
        batch_id: str,
        number_of_tries: int = DEFAULT_NUMBER_OF_TRIES,
        wait_time: float = DEFAULT_WAIT_TIME,
        content_type: ContentType = ContentType.XML,
        sleep: Optional[Callable[[float], object]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Result]:
    """
    Wait for a batch to finish and return its per-record results.

    See `wait_for_batch` for the polling arguments. Results are fetched
    exactly once, and only after a terminal state was observed.

    Returns:
        list[Result]: Decoded results, one per submitted record.
    """
    batch = wait_for_batch(
        transport, job_id, batch_id,
        number_of_tries=number_of_tries,
        wait_time=wait_time,
        sleep=sleep,
        cancel_event=cancel_event,
    )
    if batch.state is not BatchState.COMPLETED:
        logging.warning(
            f"Batch {batch_id} ended as {batch.state.value}; "
            "fetching per-record results anyway."
        )
    return get_batch_results(transport, job_id, batch_id, content_type=content_type)
