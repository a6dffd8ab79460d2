"""Low-level HTTP client for the Sumo Logic API.

Handles authentication headers, JSON encoding and decoding, rate-limit
extraction and error decoding for every request.
"""
from __future__ import annotations

import base64
import json
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Tuple
from urllib.parse import urlsplit

import requests

from .exceptions import (
    NotFoundError,
    RequestCancelledError,
    SumoLogicAPIError,
    SumoLogicError,
    TransportError,
    URLConstructionError,
)
from .models import ErrorResponse
from .ratelimit import RateLimitDescription, extract_rate_limit
from .urls import build_url

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sumologic.com"
_CHUNK_SIZE = 16 * 1024
# How often a caller waiting on response headers looks at its cancel signal.
_CANCEL_POLL_INTERVAL = 0.05


def encode_basic_credentials(access_id: str, access_key: str) -> str:
    """Encode an access ID/key pair for the ``Authorization: Basic`` header."""
    return base64.b64encode(f"{access_id}:{access_key}".encode()).decode()


@contextmanager
def operation_context(operation: str) -> Iterator[None]:
    """Prefix any Sumo Logic error raised inside the block with the operation name."""
    try:
        yield
    except SumoLogicError as exc:
        exc.with_operation(operation)
        raise


class SumoLogicClient:
    """HTTP client for the Sumo Logic API using access ID/key basic auth.

    The client holds only immutable configuration plus a ``requests.Session``
    and can be shared by concurrent callers.

    Usage:
        client = SumoLogicClient("https://api.sumologic.com", access_id, access_key)
        body, rate_limit = client.get(client.url("/api/{api-version}/roles", {"api-version": "v1"}))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        access_id: str = "",
        access_key: str = "",
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL for the account's deployment region
            access_id: Sumo Logic access ID
            access_key: Sumo Logic access key
            timeout: Optional per-request timeout in seconds (None = no timeout)
            session: Optional pre-configured requests session

        Raises:
            URLConstructionError: If the base URL cannot be parsed
        """
        parts = urlsplit(base_url or "")
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise URLConstructionError(f"error parsing API base URL '{base_url}'")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._credentials = encode_basic_credentials(access_id, access_key)
        self._session = session or requests.Session()

    def url(
        self,
        path: str,
        path_params: Optional[Mapping[str, str]] = None,
        query_params: Optional[Mapping[str, str]] = None,
        page_token: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> str:
        """Build an absolute URL for ``path`` under this client's base URL."""
        return build_url(self.base_url, path, path_params, query_params, page_token, page_size)

    def get(self, url: str, *, cancel_event: Optional[threading.Event] = None) -> Tuple[Any, RateLimitDescription]:
        """Execute a GET request and return the decoded body and rate limit."""
        return self.execute("GET", url, cancel_event=cancel_event)

    def post(
        self,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Any, RateLimitDescription]:
        """Execute a POST request with a JSON body."""
        return self.execute("POST", url, body, cancel_event=cancel_event)

    def put(
        self,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Any, RateLimitDescription]:
        """Execute a PUT request."""
        return self.execute("PUT", url, body, cancel_event=cancel_event)

    def delete(self, url: str, *, cancel_event: Optional[threading.Event] = None) -> Tuple[Any, RateLimitDescription]:
        """Execute a DELETE request."""
        return self.execute("DELETE", url, cancel_event=cancel_event)

    def execute(
        self,
        method: str,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Any, RateLimitDescription]:
        """Send a request and decode its JSON response.

        Args:
            method: HTTP method
            url: Absolute request URL
            body: Optional JSON body
            cancel_event: Set by the caller to abandon the request

        Returns:
            Tuple of (decoded body or None, rate-limit descriptor)

        Raises:
            RequestCancelledError: If ``cancel_event`` was set
            SumoLogicAPIError: On a non-2xx response (NotFoundError for 404)
            TransportError: On network or decoding failure
        """
        if _cancelled(cancel_event):
            raise RequestCancelledError("request cancelled before sending", rate_limit=RateLimitDescription())

        logger.debug(f"making request: {method} {url}")

        try:
            resp = self._send(method, url, body, cancel_event)
        except requests.RequestException as exc:
            raise TransportError(f"request failed: {exc}", rate_limit=RateLimitDescription()) from exc

        rate_limit = extract_rate_limit(resp.headers, resp.status_code)
        try:
            content = self._read_body(resp, cancel_event, rate_limit)
        finally:
            resp.close()

        self._handle_error(resp, content, rate_limit)
        return self._decode(content, rate_limit), rate_limit

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SumoLogicClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _send(
        self,
        method: str,
        url: str,
        body: Optional[Mapping[str, Any]],
        cancel_event: Optional[threading.Event],
    ) -> requests.Response:
        """Send the request and wait for the response headers.

        Without a cancel signal the request runs on the calling thread. With
        one, it runs on a worker thread while the caller watches the signal;
        on cancel the caller raises at once and the worker's response, if it
        ever arrives, is closed unread.
        """
        kwargs = dict(json=body, headers=self._headers(), timeout=self.timeout, stream=True)
        if cancel_event is None:
            return self._session.request(method, url, **kwargs)

        pending = _PendingRequest(self._session, method, url, kwargs)
        pending.start()
        while not pending.done.wait(_CANCEL_POLL_INTERVAL):
            if cancel_event.is_set():
                pending.abandon()
                logger.debug(f"request cancelled while awaiting response: {method} {url}")
                raise RequestCancelledError("request cancelled while in flight", rate_limit=RateLimitDescription())
        return pending.result()

    def _headers(self) -> dict:
        return {
            "Authorization": f"Basic {self._credentials}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _read_body(
        resp: requests.Response,
        cancel_event: Optional[threading.Event],
        rate_limit: RateLimitDescription,
    ) -> bytes:
        """Read the response body, abandoning it as soon as the caller cancels."""
        chunks = []
        try:
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                if _cancelled(cancel_event):
                    raise RequestCancelledError("request cancelled while in flight", rate_limit=rate_limit)
                chunks.append(chunk)
        except requests.RequestException as exc:
            raise TransportError(f"failed to read response: {exc}", rate_limit=rate_limit) from exc
        if _cancelled(cancel_event):
            raise RequestCancelledError("request cancelled while in flight", rate_limit=rate_limit)
        return b"".join(chunks)

    @staticmethod
    def _decode(content: bytes, rate_limit: RateLimitDescription) -> Any:
        if not content or not content.strip():
            return None
        try:
            return json.loads(content)
        except ValueError as exc:
            raise TransportError(f"invalid JSON response: {exc}", rate_limit=rate_limit) from exc

    @staticmethod
    def _handle_error(resp: requests.Response, content: bytes, rate_limit: RateLimitDescription) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            SumoLogicAPIError: If the status is outside 2xx
        """
        if 200 <= resp.status_code < 300:
            return

        error: Optional[ErrorResponse] = None
        try:
            payload = json.loads(content) if content else None
            if isinstance(payload, dict):
                error = ErrorResponse.from_dict(payload)
        except ValueError:
            pass
        if error is None:
            text = content.decode("utf-8", errors="replace").strip() if content else ""
            error = ErrorResponse(code=f"http.{resp.status_code}", message=text or (resp.reason or ""))

        exc_type = NotFoundError if resp.status_code == 404 else SumoLogicAPIError
        raise exc_type(resp.status_code, error, resp.url, rate_limit=rate_limit)


class _PendingRequest:
    """A request running on a daemon worker thread."""

    def __init__(self, session: requests.Session, method: str, url: str, kwargs: dict):
        self.done = threading.Event()
        self._session = session
        self._method = method
        self._url = url
        self._kwargs = kwargs
        self._lock = threading.Lock()
        self._abandoned = False
        self._response: Optional[requests.Response] = None
        self._error: Optional[Exception] = None

    def start(self) -> None:
        threading.Thread(target=self._run, name="sumologic-request", daemon=True).start()

    def _run(self) -> None:
        try:
            resp = self._session.request(self._method, self._url, **self._kwargs)
        except Exception as exc:
            # handed back to the caller by result()
            self._error = exc
        else:
            with self._lock:
                if self._abandoned:
                    resp.close()
                else:
                    self._response = resp
        finally:
            self.done.set()

    def abandon(self) -> None:
        with self._lock:
            self._abandoned = True
            if self._response is not None:
                self._response.close()
                self._response = None

    def result(self) -> requests.Response:
        if self._error is not None:
            raise self._error
        return self._response


def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()
