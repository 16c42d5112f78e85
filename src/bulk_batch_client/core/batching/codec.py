# -*- coding: utf-8 -*-

"""
Wire codec for the asynchronous bulk API.

Decodes jobInfo, batchInfo, batchInfoList and result documents into the
value objects of `models`, and encodes the job state change documents sent
when closing or aborting a job. XML namespaces are ignored when matching
tags, so both namespaced and bare documents are accepted.
"""

import csv
import io
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import List, Optional, Tuple

from ..errors import DecodeError
from .models import Batch, BatchState, ContentType, Job, JobState, Result

ASYNC_API_NAMESPACE = "http://www.force.com/2009/06/asyncapi/dataload"

CSV_RESULT_HEADER = ("Id", "Success", "Created", "Error")


#=============================================================================
# XML helpers
#=============================================================================

def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_root(document: str | bytes, kind: str, root_tag: str) -> ET.Element:
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise DecodeError(kind, f"malformed XML ({e})") from e
    if _local_name(root.tag) != root_tag:
        raise DecodeError(
            kind, f"expected <{root_tag}> root element, got <{_local_name(root.tag)}>"
        )
    return root


def _fields(element: ET.Element) -> dict:
    """Map the local names of simple child elements to their stripped text."""
    return {
        _local_name(child.tag): (child.text or "").strip()
        for child in element
        if len(child) == 0
    }


def _as_int(fields: dict, name: str, kind: str) -> int:
    value = fields.get(name)
    if not value:
        return 0
    try:
        return int(value)
    except ValueError as e:
        raise DecodeError(kind, f"{name} is not an integer: {value!r}") from e


def _as_bool(value: Optional[str], name: str, kind: str) -> bool:
    normalized = (value or "").strip().lower()
    if normalized == "true":
        return True
    if normalized in ("false", ""):
        return False
    raise DecodeError(kind, f"{name} is not a boolean: {value!r}")


def _as_datetime(fields: dict, name: str, kind: str) -> Optional[datetime]:
    value = fields.get(name)
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DecodeError(kind, f"{name} is not a timestamp: {value!r}") from e


def _as_enum(enum_cls, fields: dict, name: str, kind: str):
    value = fields.get(name)
    try:
        return enum_cls(value)
    except ValueError as e:
        raise DecodeError(kind, f"unknown {name}: {value!r}") from e


def _required(fields: dict, name: str, kind: str) -> str:
    value = fields.get(name)
    if not value:
        raise DecodeError(kind, f"missing {name}")
    return value


#=============================================================================
# Jobs and batches
#=============================================================================

def decode_job(document: str | bytes) -> Job:
    """Decode a jobInfo document."""
    kind = "jobInfo"
    fields = _fields(_parse_root(document, kind, kind))
    content_type = fields.get("contentType")
    return Job(
        id=_required(fields, "id", kind),
        state=_as_enum(JobState, fields, "state", kind),
        object=fields.get("object") or None,
        operation=fields.get("operation") or None,
        content_type=(
            _as_enum(ContentType, fields, "contentType", kind)
            if content_type else None
        ),
        concurrency_mode=fields.get("concurrencyMode") or None,
        created_by_id=fields.get("createdById") or None,
        created_date=_as_datetime(fields, "createdDate", kind),
        system_modstamp=_as_datetime(fields, "systemModstamp", kind),
        api_version=fields.get("apiVersion") or None,
        number_batches_queued=_as_int(fields, "numberBatchesQueued", kind),
        number_batches_in_progress=_as_int(fields, "numberBatchesInProgress", kind),
        number_batches_completed=_as_int(fields, "numberBatchesCompleted", kind),
        number_batches_failed=_as_int(fields, "numberBatchesFailed", kind),
        number_batches_total=_as_int(fields, "numberBatchesTotal", kind),
        number_records_processed=_as_int(fields, "numberRecordsProcessed", kind),
        number_records_failed=_as_int(fields, "numberRecordsFailed", kind),
        number_retries=_as_int(fields, "numberRetries", kind),
        total_processing_time=_as_int(fields, "totalProcessingTime", kind),
        api_active_processing_time=_as_int(fields, "apiActiveProcessingTime", kind),
        apex_processing_time=_as_int(fields, "apexProcessingTime", kind),
    )


def _batch_from_element(element: ET.Element) -> Batch:
    kind = "batchInfo"
    fields = _fields(element)
    return Batch(
        id=_required(fields, "id", kind),
        job_id=_required(fields, "jobId", kind),
        state=_as_enum(BatchState, fields, "state", kind),
        state_message=fields.get("stateMessage") or None,
        created_date=_as_datetime(fields, "createdDate", kind),
        system_modstamp=_as_datetime(fields, "systemModstamp", kind),
        number_records_processed=_as_int(fields, "numberRecordsProcessed", kind),
        number_records_failed=_as_int(fields, "numberRecordsFailed", kind),
        total_processing_time=_as_int(fields, "totalProcessingTime", kind),
        api_active_processing_time=_as_int(fields, "apiActiveProcessingTime", kind),
        apex_processing_time=_as_int(fields, "apexProcessingTime", kind),
    )


def decode_batch(document: str | bytes) -> Batch:
    """Decode a batchInfo document."""
    return _batch_from_element(_parse_root(document, "batchInfo", "batchInfo"))


def decode_batch_list(document: str | bytes) -> List[Batch]:
    """Decode a batchInfoList document, keeping the server order."""
    root = _parse_root(document, "batchInfoList", "batchInfoList")
    return [
        _batch_from_element(child)
        for child in root
        if _local_name(child.tag) == "batchInfo"
    ]


#=============================================================================
# Results
#=============================================================================

def _format_error(status_code: str, message: str) -> str:
    if status_code and message:
        return f"{status_code}:{message}"
    return status_code or message


def _result_from_element(element: ET.Element) -> Result:
    kind = "results"
    fields = _fields(element)
    errors = []
    for child in element:
        if _local_name(child.tag) != "errors":
            continue
        error_fields = _fields(child)
        formatted = _format_error(
            error_fields.get("statusCode", ""), error_fields.get("message", "")
        )
        if formatted:
            errors.append(formatted)
    return Result(
        success=_as_bool(fields.get("success"), "success", kind),
        id=fields.get("id") or None,
        created=_as_bool(fields.get("created"), "created", kind),
        error="; ".join(errors) or None,
    )


def _decode_xml_results(document: str | bytes) -> List[Result]:
    root = _parse_root(document, "results", "results")
    return [
        _result_from_element(child)
        for child in root
        if _local_name(child.tag) == "result"
    ]


def _decode_csv_results(document: str | bytes) -> List[Result]:
    kind = "results"
    if isinstance(document, bytes):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(kind, f"CSV is not valid UTF-8 ({e})") from e
    reader = csv.DictReader(io.StringIO(document))
    try:
        header = reader.fieldnames
        missing = [name for name in CSV_RESULT_HEADER if name not in (header or [])]
        if missing:
            raise DecodeError(kind, f"CSV header is missing columns {missing}")
        results = []
        for row in reader:
            # DictReader stores extra cells under None and pads short rows with None
            extra = row.pop(None, None) or []
            columns = sum(value is not None for value in row.values()) + len(extra)
            if columns != len(header):
                raise DecodeError(
                    kind, f"row {reader.line_num} has {columns} columns, expected {len(header)}"
                )
            results.append(Result(
                success=_as_bool(row["Success"], "Success", kind),
                id=row["Id"] or None,
                created=_as_bool(row["Created"], "Created", kind),
                error=row["Error"] or None,
            ))
    except csv.Error as e:
        raise DecodeError(kind, f"malformed CSV ({e})") from e
    return results


def decode_result_list(
        document: str | bytes,
        content_type: ContentType = ContentType.XML
    ) -> List[Result]:
    """
    Decode the per-record results of a batch.

    Args:
        document: Raw result document as returned by the API.
        content_type: Content type of the job, which determines whether the
            results come back as XML or CSV.

    Returns:
        list[Result]: One result per submitted record, in submission order.
    """
    if ContentType(content_type) is ContentType.CSV:
        return _decode_csv_results(document)
    return _decode_xml_results(document)


#=============================================================================
# Job state changes and API errors
#=============================================================================

def encode_job_state(state: JobState) -> str:
    """Encode the jobInfo document that moves a job into `state`."""
    root = ET.Element("jobInfo", xmlns=ASYNC_API_NAMESPACE)
    ET.SubElement(root, "state").text = JobState(state).value
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


def decode_api_error(document: str | bytes) -> Tuple[Optional[str], Optional[str]]:
    """
    Decode an API error document.

    Returns:
        tuple: (exception_code, exception_message); either may be None.
    """
    fields = _fields(_parse_root(document, "error", "error"))
    return (
        fields.get("exceptionCode") or None,
        fields.get("exceptionMessage") or None,
    )
