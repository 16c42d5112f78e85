# -*- coding: utf-8 -*-

"""
Transport clients for the asynchronous bulk API.

The batch operations only need two calls: `create` (POST a document to a
resource) and `read` (GET a resource). `Transport` describes that contract;
`HttpTransport` implements it over httpx with retries on transient errors.
"""

import logging
from typing import Optional, Protocol, Sequence
from urllib.parse import quote

import httpx
from tenacity import (retry, retry_if_exception_type, retry_if_result,
                      stop_after_attempt, wait_exponential)

from ..batching.codec import decode_api_error
from ..batching.models import ContentType
from ..errors import DecodeError, TransportError
from .environment import get_connection_settings

DEFAULT_API_VERSION = "59.0"
DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)
DEFAULT_MAX_RETRIES = 4
XML_MEDIA_TYPE = ContentType.XML.media_type

TRANSIENT_STATUS_CODES = (429, 502, 503, 504)
TRANSIENT_HTTPX_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)

# POST retries are limited to failures where the server cannot have created anything
UNSENT_HTTPX_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)
REJECTED_STATUS_CODES = (429, 503)


class Transport(Protocol):
    """Two-call contract consumed by the batch operations."""

    def create(
            self,
            path: Sequence[str],
            body: str,
            media_type: str = XML_MEDIA_TYPE
        ) -> str:
        ...

    def read(self, path: Sequence[str]) -> str:
        ...


def _last_outcome(retry_state):
    # Hand back the last response, or re-raise the last exception
    return retry_state.outcome.result()


def retry_on_transient_http_errors(
        max_attempts: int,
        errors: tuple = TRANSIENT_HTTPX_ERRORS,
        status_codes: tuple = TRANSIENT_STATUS_CODES
    ):
    """Build a tenacity decorator retrying `errors` and responses with `status_codes`."""
    def is_retryable_response(response: httpx.Response) -> bool:
        return response.status_code in status_codes

    return retry(
        retry=(
            retry_if_exception_type(errors)
            | retry_if_result(is_retryable_response)
        ),
        wait=wait_exponential(min=1, max=30),
        stop=stop_after_attempt(max_attempts),
        retry_error_callback=_last_outcome,
    )


class HttpTransport:
    """
    httpx based transport for the `/services/async/<version>/` API.

    Args:
        instance_url (str): Base URL of the instance, e.g. https://example.my.salesforce.com
        session_id (str): Session id sent in the X-SFDC-Session header.
        api_version (str): API version used in the resource path.
        timeout (httpx.Timeout): Connection and read timeouts.
        max_retries (int): Retries on transient errors before giving up. A
            `create` is only retried when the request never reached the server
            or was rejected with 429/503, so a batch is never created twice.
        http_transport (httpx.BaseTransport): Optional low-level httpx transport,
            mainly used to plug in `httpx.MockTransport`.
    """

    def __init__(
        self,
        instance_url: str,
        session_id: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        http_transport: Optional[httpx.BaseTransport] = None
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.instance_url = instance_url.rstrip("/")
        self.api_version = str(api_version)
        self.base_url = f"{self.instance_url}/services/async/{self.api_version}/"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"X-SFDC-Session": session_id},
            timeout=timeout,
            transport=http_transport,
        )
        self._send = retry_on_transient_http_errors(max_retries + 1)(self._send_once)
        self._send_create = retry_on_transient_http_errors(
            max_retries + 1, UNSENT_HTTPX_ERRORS, REJECTED_STATUS_CODES
        )(self._send_once)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._client.close()

    @staticmethod
    def build_url_path(path: Sequence[str]) -> str:
        return "/".join(quote(str(segment), safe="") for segment in path)

    def create(
            self,
            path: Sequence[str],
            body: str,
            media_type: str = XML_MEDIA_TYPE
        ) -> str:
        """POST `body` to the resource addressed by `path`."""
        return self._request(
            "POST", path,
            send=self._send_create,
            content=body.encode("utf-8"),
            headers={"Content-Type": media_type},
        )

    def read(self, path: Sequence[str]) -> str:
        """GET the resource addressed by `path`."""
        return self._request("GET", path)

    def _send_once(self, method, url, **kwargs) -> httpx.Response:
        return self._client.request(method, url, **kwargs)

    def _request(self, method: str, path: Sequence[str], send=None, **kwargs) -> str:
        url = self.build_url_path(path)
        send = send or self._send
        logging.debug(f"{method} {self.base_url}{url}")
        try:
            response = send(method, url, **kwargs)
        except httpx.HTTPError as e:
            logging.error(f"{method} {url} failed: {e}")
            raise TransportError(str(e) or type(e).__name__, path=path) from e

        if response.is_success:
            return response.text

        exception_code, message = None, None
        if response.content:
            try:
                exception_code, message = decode_api_error(response.content)
            except DecodeError:
                message = response.text.strip()
        message = message or response.reason_phrase
        logging.error(f"{method} {url} returned HTTP {response.status_code}: {message}")
        raise TransportError(
            message,
            status_code=response.status_code,
            exception_code=exception_code,
            path=path,
        )


def create_http_transport(instance_url=None, session_id=None, api_version=None, **kwargs):
    """
    Create an HTTP transport for API calls.

    Args:
        instance_url (str): Instance base URL. If not provided, it will be fetched from BULK_INSTANCE_URL.
        session_id (str): Session id. If not provided, it will be fetched from BULK_SESSION_ID.
        api_version (str): API version. If not provided, BULK_API_VERSION or the default is used.
        **kwargs: Forwarded to HttpTransport.
    """
    env = get_connection_settings()

    if instance_url is None:
        instance_url = env["instance_url"]
    if not instance_url:
        raise ValueError("No instance URL provided or found in environment.")

    if session_id is None:
        session_id = env["session_id"]
    if not session_id:
        raise ValueError("No session id provided or found in environment.")

    if api_version is None:
        api_version = env["api_version"] or DEFAULT_API_VERSION

    transport = HttpTransport(instance_url, session_id, api_version=api_version, **kwargs)
    logging.info("HTTP transport created successfully.")
    return transport
