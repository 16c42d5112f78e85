"""
Shared fixtures: an in-memory transport and builders for API documents.
"""
from collections import defaultdict, deque

import pytest

from bulk_batch_client.core.batching.codec import ASYNC_API_NAMESPACE
from bulk_batch_client.core.errors import TransportError

JOB_ID = "750xx0000000001"


class FakeTransport:
    """
    Transport double that serves queued responses per resource path.

    Each queued item is either a string (returned) or an exception (raised).
    The last item of a queue is repeated once the queue is drained.
    """

    def __init__(self):
        self.calls = []
        self._responses = defaultdict(deque)
        self.closed = False

    def queue(self, path, *responses):
        self._responses[tuple(path)].extend(responses)

    def _next(self, path):
        path = tuple(path)
        responses = self._responses.get(path)
        if not responses:
            raise TransportError("no response queued", status_code=404, path=path)
        item = responses.popleft() if len(responses) > 1 else responses[0]
        if isinstance(item, BaseException):
            raise item
        return item

    def create(self, path, body, media_type="application/xml; charset=UTF-8"):
        self.calls.append(("create", tuple(path), body, media_type))
        return self._next(path)

    def read(self, path):
        self.calls.append(("read", tuple(path)))
        return self._next(path)

    def close(self):
        self.closed = True

    def calls_to(self, path):
        return [call for call in self.calls if call[1] == tuple(path)]


def job_xml(job_id=JOB_ID, state="Open", content_type="XML", **extra):
    fields = "".join(f"<{k}>{v}</{k}>" for k, v in extra.items())
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<jobInfo xmlns="{ASYNC_API_NAMESPACE}">'
        f"<id>{job_id}</id><operation>insert</operation><object>Account</object>"
        f"<createdById>005xx000001Sv6m</createdById>"
        f"<createdDate>2024-03-01T10:00:00.000Z</createdDate>"
        f"<state>{state}</state><concurrencyMode>Parallel</concurrencyMode>"
        f"<contentType>{content_type}</contentType>"
        f"<numberBatchesTotal>2</numberBatchesTotal>"
        f"<numberRecordsProcessed>5</numberRecordsProcessed>"
        f"<apiVersion>59.0</apiVersion>{fields}"
        "</jobInfo>"
    )


def batch_element(batch_id, state, job_id=JOB_ID, message=None):
    state_message = f"<stateMessage>{message}</stateMessage>" if message else ""
    return (
        f"<batchInfo><id>{batch_id}</id><jobId>{job_id}</jobId>"
        f"<state>{state}</state>{state_message}"
        f"<createdDate>2024-03-01T10:00:05.000Z</createdDate>"
        f"<numberRecordsProcessed>2</numberRecordsProcessed>"
        f"<numberRecordsFailed>1</numberRecordsFailed>"
        "</batchInfo>"
    )


def batch_xml(batch_id, state, job_id=JOB_ID, message=None):
    element = batch_element(batch_id, state, job_id, message)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        + element.replace("<batchInfo>", f'<batchInfo xmlns="{ASYNC_API_NAMESPACE}">', 1)
    )


def batch_list_xml(*elements):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<batchInfoList xmlns="{ASYNC_API_NAMESPACE}">'
        + "".join(elements)
        + "</batchInfoList>"
    )


RESULTS_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    f'<results xmlns="{ASYNC_API_NAMESPACE}">'
    "<result><id>001xx000003DGb1</id><success>true</success><created>true</created></result>"
    "<result><success>false</success><created>false</created>"
    "<errors><statusCode>REQUIRED_FIELD_MISSING</statusCode>"
    "<message>Required fields are missing: [Name]</message><fields>Name</fields></errors>"
    "</result>"
    "</results>"
)

RESULTS_CSV = (
    '"Id","Success","Created","Error"\n'
    '"001xx000003DGb1","true","true",""\n'
    '"","false","false","REQUIRED_FIELD_MISSING:Required fields are missing: [Name]:Name --"\n'
)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sleeps():
    """Recording sleep function; collects the requested durations."""
    recorded = []

    def sleep(seconds):
        recorded.append(seconds)

    sleep.calls = recorded
    return sleep
