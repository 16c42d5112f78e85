"""
Batch operations for the bulk batch client.

Submodules:
    models:  Job, Batch and Result value objects and their state enums
    codec:   XML/CSV wire codec
    files:   Batch upload file reading
    jobs:    One-call operations on a job (submit, info, close, abort, ...)
    polling: Wait for a batch to finish and fetch its results
    manager: BatchOperator, the handle exposing every operation on a job
    utils:   Result summaries and saving results or metadata to disk

Example Usage:
    import bulk_batch_client as bbc

    batch = bbc.batching.jobs.submit_batch(transport, job_id, payload)
    batch = bbc.batching.jobs.get_batch_info(transport, job_id, batch.id)
    results = bbc.batching.polling.get_batch_result(
        transport, job_id, batch.id, number_of_tries=10, wait_time=5000
    )
"""

from . import models
from . import codec
from . import files
from . import jobs
from . import polling
from . import manager
from . import utils

__all__ = [
    'models',     # bbc.batching.models.*
    'codec',      # bbc.batching.codec.*
    'files',      # bbc.batching.files.*
    'jobs',       # bbc.batching.jobs.*
    'polling',    # bbc.batching.polling.*
    'manager',    # bbc.batching.manager.*
    'utils',      # bbc.batching.utils.*
]
