# -*- coding: utf-8 -*-
"""
This module provides functions to operate on an existing bulk API job:
submitting batches, reading job and batch information, closing or aborting
the job and fetching batch requests and results.

Each function issues exactly one transport call and decodes the response
with the wire codec. Transport and decoding errors propagate unchanged;
retries on transient errors are the transport's own business.
"""


import logging
from typing import List

from ..utils.clients import Transport
from .codec import (
    decode_batch,
    decode_batch_list,
    decode_job,
    decode_result_list,
    encode_job_state,
)
from .models import Batch, BatchState, ContentType, Job, JobState, Result

JOB = "job"
BATCH = "batch"
REQUEST = "request"
RESULT = "result"


#=============================================================================
# Resource Paths
#=============================================================================

def job_path(job_id: str) -> tuple:
    return (JOB, job_id)


def batch_collection_path(job_id: str) -> tuple:
    return (JOB, job_id, BATCH)


def batch_path(job_id: str, batch_id: str) -> tuple:
    return (JOB, job_id, BATCH, batch_id)


def batch_request_path(job_id: str, batch_id: str) -> tuple:
    return (JOB, job_id, BATCH, batch_id, REQUEST)


def batch_result_path(job_id: str, batch_id: str) -> tuple:
    return (JOB, job_id, BATCH, batch_id, RESULT)


#=============================================================================
# Batch Submission
#=============================================================================

def submit_batch(
        transport: Transport,
        job_id: str,
        payload: str,
        content_type: ContentType = ContentType.XML
    ) -> Batch:
    """
    Create a batch in a job from an in-memory document.

    Args:
        transport: Transport used for the API call.
        job_id (str): The ID of the job.
        payload (str): The records document to upload.
        content_type (ContentType): Content type of the job.

    Returns:
        Batch: The newly created batch.
    """
    logging.info(f"Submitting batch to job {job_id}...")
    document = transport.create(
        batch_collection_path(job_id),
        payload,
        media_type=ContentType(content_type).media_type,
    )
    batch = decode_batch(document)
    logging.info(f"Batch created with ID: {batch.id} (state: {batch.state.value})")
    return batch


#=============================================================================
# Job Information and State Changes
#=============================================================================

def get_job_info(transport: Transport, job_id: str) -> Job:
    """Fetch the current information of a job."""
    logging.debug(f"Fetching info for job {job_id}")
    return decode_job(transport.read(job_path(job_id)))


def update_job_state(transport: Transport, job_id: str, state: JobState) -> Job:
    """
    Move a job into a new state.

    Args:
        transport: Transport used for the API call.
        job_id (str): The ID of the job.
        state (JobState): Target state (Closed or Aborted).

    Returns:
        Job: The job as returned by the server after the change.
    """
    state = JobState(state)
    logging.info(f"Setting job {job_id} state to {state.value}...")
    job = decode_job(transport.create(job_path(job_id), encode_job_state(state)))
    logging.info(f"Job {job_id} is now {job.state.value}.")
    return job


def close_job(transport: Transport, job_id: str) -> Job:
    """Close a job so no more batches can be added."""
    return update_job_state(transport, job_id, JobState.CLOSED)


def abort_job(transport: Transport, job_id: str) -> Job:
    """Abort a job; unprocessed batches will not be processed."""
    return update_job_state(transport, job_id, JobState.ABORTED)


#=============================================================================
# Batch Information
#=============================================================================

def get_batch_info(transport: Transport, job_id: str, batch_id: str) -> Batch:
    """
    Fetch the current information of a batch.

    Args:
        transport: Transport used for the API call.
        job_id (str): The ID of the job.
        batch_id (str): The ID of the batch.

    Returns:
        Batch: The batch, including its current state.
    """
    batch = decode_batch(transport.read(batch_path(job_id, batch_id)))
    if batch.state is BatchState.FAILED:
        logging.warning(f"Batch {batch_id} failed: {batch.state_message}")
    else:
        logging.debug(f"Batch {batch_id} is in state: {batch.state.value}")
    return batch


def list_batches(transport: Transport, job_id: str) -> List[Batch]:
    """List all batches of a job in the order returned by the server."""
    logging.debug(f"Listing batches of job {job_id}")
    batches = decode_batch_list(transport.read(batch_collection_path(job_id)))
    logging.info(f"Found {len(batches)} batches in job {job_id}.")
    return batches


def get_batch_request(transport: Transport, job_id: str, batch_id: str) -> str:
    """Fetch the original document submitted for a batch, undecoded."""
    logging.debug(f"Fetching request of batch {batch_id}")
    return transport.read(batch_request_path(job_id, batch_id))


def get_batch_results(
        transport: Transport,
        job_id: str,
        batch_id: str,
        content_type: ContentType = ContentType.XML
    ) -> List[Result]:
    """
    Fetch and decode the per-record results of a batch.

    Only meaningful once the batch is in a terminal state; callers are
    expected to poll first (see `polling.get_batch_result`).
    """
    logging.info(f"Downloading results for batch {batch_id}...")
    results = decode_result_list(
        transport.read(batch_result_path(job_id, batch_id)),
        content_type=content_type,
    )
    logging.info(f"Downloaded {len(results)} results for batch {batch_id}.")
    return results
