"""
Tests for waiting on batches and fetching their results.
"""
import threading

import pytest

from bulk_batch_client.core.batching import jobs, polling
from bulk_batch_client.core.batching.models import BatchState, ContentType, Result
from bulk_batch_client.core.errors import (
    PollCancelledError, PollExhaustedError, TransportError,
)

from conftest import JOB_ID, RESULTS_CSV, RESULTS_XML, batch_xml

BATCH_ID = "751xx0000000001"
INFO_PATH = jobs.batch_path(JOB_ID, BATCH_ID)
RESULT_PATH = jobs.batch_result_path(JOB_ID, BATCH_ID)


class TestWaitForBatch:

    def test_terminal_on_second_check(self, transport, sleeps):
        """Sleeps before each check and stops as soon as the batch is done."""
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "InProgress"), batch_xml(BATCH_ID, "Completed"))

        batch = polling.wait_for_batch(
            transport, JOB_ID, BATCH_ID, number_of_tries=3, wait_time=10, sleep=sleeps
        )

        assert batch.state is BatchState.COMPLETED
        assert sleeps.calls == [0.01, 0.01]
        assert len(transport.calls_to(INFO_PATH)) == 2

    def test_single_try_checks_once(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "Completed"))

        polling.wait_for_batch(transport, JOB_ID, BATCH_ID, number_of_tries=1, wait_time=0, sleep=sleeps)

        assert sleeps.calls == [0]
        assert len(transport.calls_to(INFO_PATH)) == 1

    def test_terminal_on_last_allowed_check(self, transport, sleeps):
        transport.queue(
            INFO_PATH,
            batch_xml(BATCH_ID, "Queued"),
            batch_xml(BATCH_ID, "InProgress"),
            batch_xml(BATCH_ID, "Not Processed"),
        )

        batch = polling.wait_for_batch(
            transport, JOB_ID, BATCH_ID, number_of_tries=3, wait_time=5, sleep=sleeps
        )

        assert batch.state is BatchState.NOT_PROCESSED
        assert len(sleeps.calls) == 3

    def test_exhausted_reports_attempts(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "InProgress"))

        with pytest.raises(PollExhaustedError) as exc_info:
            polling.wait_for_batch(
                transport, JOB_ID, BATCH_ID, number_of_tries=2, wait_time=10, sleep=sleeps
            )

        assert exc_info.value.batch_id == BATCH_ID
        assert exc_info.value.attempts == 2
        assert "not completed within allotted retries" in str(exc_info.value)
        assert len(transport.calls_to(INFO_PATH)) == 2

    def test_transport_error_is_not_retried(self, transport, sleeps):
        error = TransportError("Service Unavailable", status_code=503)
        transport.queue(INFO_PATH, error, batch_xml(BATCH_ID, "Completed"))

        with pytest.raises(TransportError) as exc_info:
            polling.wait_for_batch(
                transport, JOB_ID, BATCH_ID, number_of_tries=5, wait_time=10, sleep=sleeps
            )

        assert exc_info.value is error
        assert len(transport.calls_to(INFO_PATH)) == 1

    @pytest.mark.parametrize("number_of_tries, wait_time", [(0, 10), (-1, 10), (1, -5)])
    def test_invalid_arguments(self, transport, sleeps, number_of_tries, wait_time):
        with pytest.raises(ValueError):
            polling.wait_for_batch(
                transport, JOB_ID, BATCH_ID,
                number_of_tries=number_of_tries, wait_time=wait_time, sleep=sleeps,
            )
        assert transport.calls == []

    def test_cancel_before_first_check(self, transport, sleeps):
        cancel_event = threading.Event()
        cancel_event.set()
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "Completed"))

        with pytest.raises(PollCancelledError) as exc_info:
            polling.wait_for_batch(
                transport, JOB_ID, BATCH_ID, number_of_tries=3, wait_time=10,
                sleep=sleeps, cancel_event=cancel_event,
            )

        assert exc_info.value.attempts == 0
        assert transport.calls == []
        assert sleeps.calls == []

    def test_cancel_during_wait(self, transport):
        cancel_event = threading.Event()
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "InProgress"))

        def sleep(seconds):
            if len(transport.calls) == 2:
                cancel_event.set()

        with pytest.raises(PollCancelledError) as exc_info:
            polling.wait_for_batch(
                transport, JOB_ID, BATCH_ID, number_of_tries=10, wait_time=10,
                sleep=sleep, cancel_event=cancel_event,
            )

        assert exc_info.value.attempts == 2
        assert len(transport.calls) == 2

    def test_cancel_event_interrupts_default_sleep(self, transport):
        """Without an injected sleep, waiting on the event returns as soon as it is set."""
        cancel_event = threading.Event()
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "InProgress"))
        timer = threading.Timer(0.05, cancel_event.set)
        timer.start()
        try:
            with pytest.raises(PollCancelledError):
                polling.wait_for_batch(
                    transport, JOB_ID, BATCH_ID, number_of_tries=3, wait_time=60_000,
                    cancel_event=cancel_event,
                )
        finally:
            timer.cancel()
        assert transport.calls == []


class TestGetBatchResult:

    def test_fetches_results_once_after_completion(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "InProgress"), batch_xml(BATCH_ID, "Completed"))
        transport.queue(RESULT_PATH, RESULTS_XML)

        results = polling.get_batch_result(
            transport, JOB_ID, BATCH_ID, number_of_tries=3, wait_time=10, sleep=sleeps
        )

        assert [r.success for r in results] == [True, False]
        assert len(transport.calls_to(RESULT_PATH)) == 1
        assert transport.calls[-1] == ("read", RESULT_PATH)

    def test_failed_batch_still_returns_results(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "Failed", message="InvalidBatch"))
        transport.queue(RESULT_PATH, RESULTS_CSV)

        results = polling.get_batch_result(
            transport, JOB_ID, BATCH_ID, number_of_tries=1, wait_time=0,
            content_type=ContentType.CSV, sleep=sleeps,
        )

        assert results[0] == Result(success=True, id="001xx000003DGb1", created=True)
        assert len(results) == 2

    def test_no_results_fetched_when_exhausted(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "Queued"))
        transport.queue(RESULT_PATH, RESULTS_XML)

        with pytest.raises(PollExhaustedError):
            polling.get_batch_result(
                transport, JOB_ID, BATCH_ID, number_of_tries=2, wait_time=10, sleep=sleeps
            )

        assert transport.calls_to(RESULT_PATH) == []

    def test_result_fetch_error_propagates(self, transport, sleeps):
        transport.queue(INFO_PATH, batch_xml(BATCH_ID, "Completed"))
        transport.queue(RESULT_PATH, TransportError("boom", status_code=500))

        with pytest.raises(TransportError, match="boom"):
            polling.get_batch_result(transport, JOB_ID, BATCH_ID, wait_time=0, sleep=sleeps)
