"""HTTP adapter implementation for the backend job service REST API."""

from __future__ import annotations

import copy
import json
from typing import Any, Final
from urllib.parse import quote

import httpx

from job_submission.domain import (
    JobCreatedResponse,
    JobDetails,
    JobOutput,
    JobRequest,
    JobSpec,
    JobSpecSummary,
    domain_parse_job_created_response,
    domain_parse_job_details,
    domain_parse_job_outputs,
    domain_parse_job_spec,
    domain_parse_job_spec_summaries,
)

from .interfaces import JobApiClientPort
from .job_api_errors import (
    JobApiConnectionError,
    JobApiError,
    JobApiNotFoundError,
    JobApiResponseError,
    JobApiTimeoutError,
)
from .pending_requests import PendingRequestTracker


class HttpJobApiClient(JobApiClientPort):
    """Async REST client for the `/v1` job service API."""

    _USER_AGENT: Final[str] = "job-submission/1.0 (Python/httpx)"
    _NOT_FOUND_STATUS: Final[int] = 404

    def __init__(
        self,
        base_url: str,
        request_timeout_seconds: float = 30.0,
        pending_request_tracker: PendingRequestTracker | None = None,
        websocket_base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the job service client.

        Args:
            base_url: API prefix URL, e.g. `https://jobs.example.test/api`.
            request_timeout_seconds: HTTP request timeout in seconds.
            pending_request_tracker: Optional tracker notified of in-flight requests.
            websocket_base_url: Optional WebSocket prefix; derived from base_url when omitted.
            transport: Optional httpx transport override (used by tests).

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip().rstrip("/")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._base_url = normalized_base_url
        self._websocket_base_url = (
            websocket_base_url.strip().rstrip("/")
            if websocket_base_url and websocket_base_url.strip()
            else adapter_derive_websocket_base_url(normalized_base_url)
        )
        self._pending_request_tracker = pending_request_tracker
        self._http_client = httpx.AsyncClient(
            base_url=normalized_base_url,
            timeout=request_timeout_seconds,
            transport=transport,
            headers={"User-Agent": self._USER_AGENT},
        )

    async def __aenter__(self) -> HttpJobApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.client_close()

    async def client_close(self) -> None:
        """Close the pooled HTTP client.

        Returns:
            None: Releases transport resources as side effect.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        await self._http_client.aclose()

    def client_bind_tracker(self, pending_request_tracker: PendingRequestTracker) -> HttpJobApiClient:
        """Return a view of this client that reports requests into another tracker.

        The view shares the pooled HTTP connection; only the owning client
        should be closed.

        Args:
            pending_request_tracker: Tracker notified of the view's in-flight requests.

        Returns:
            HttpJobApiClient: Tracker-scoped client sharing this client's pool.

        Raises:
            ValueError: Raised when pending_request_tracker is None.
        """

        if pending_request_tracker is None:
            raise ValueError("pending_request_tracker must not be None")
        bound_client = copy.copy(self)
        bound_client._pending_request_tracker = pending_request_tracker
        return bound_client

    def client_base_url(self) -> str:
        """Return the normalized API prefix URL.

        Returns:
            str: Base URL without trailing slash.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self._base_url

    async def client_fetch_job_spec_summaries(self) -> list[JobSpecSummary]:
        payload = await self._client_request_json("GET", "/v1/specs")
        return self._client_parse(domain_parse_job_spec_summaries, payload)

    async def client_fetch_job_spec(self, spec_id: str) -> JobSpec:
        payload = await self._client_request_json("GET", f"/v1/specs/{_quote_segment(spec_id)}")
        return self._client_parse(domain_parse_job_spec, payload)

    async def client_fetch_job_details(self, job_id: str) -> JobDetails:
        payload = await self._client_request_json("GET", f"/v1/jobs/{_quote_segment(job_id)}")
        return self._client_parse(domain_parse_job_details, payload)

    async def client_fetch_job_inputs(self, job_id: str) -> dict[str, Any]:
        payload = await self._client_request_json("GET", f"/v1/jobs/{_quote_segment(job_id)}/inputs")
        if not isinstance(payload, dict):
            raise JobApiResponseError("job inputs payload must be an object", code=200)
        return payload

    async def client_fetch_job_spec_for_job(self, job_id: str) -> JobSpec:
        payload = await self._client_request_json("GET", f"/v1/jobs/{_quote_segment(job_id)}/spec")
        return self._client_parse(domain_parse_job_spec, payload)

    async def client_submit_job_request(self, request: JobRequest) -> JobCreatedResponse:
        payload = await self._client_request_json("POST", "/v1/jobs", json_body=request.request_to_payload())
        return self._client_parse(domain_parse_job_created_response, payload)

    async def client_fetch_job_summaries(self, query: str = "", page: int = 0) -> dict[str, Any]:
        """Return one page of job summaries, optionally filtered by a search query.

        Args:
            query: Optional free-text query.
            page: Zero-based page index.

        Returns:
            dict[str, Any]: Raw collection payload (`entries` plus links).

        Raises:
            JobApiError: Raised when the backend call fails.
        """

        query_parameters: dict[str, str | int] = {"page": page}
        if query:
            query_parameters = {"query": query, "page": page}
        payload = await self._client_request_json("GET", "/v1/jobs", query_parameters=query_parameters)
        if not isinstance(payload, dict):
            raise JobApiResponseError("job summaries payload must be an object", code=200)
        return payload

    async def client_fetch_job_outputs(self, job_id: str) -> list[JobOutput]:
        """Return metadata for every output a job produced.

        Args:
            job_id: Job identifier.

        Returns:
            list[JobOutput]: Output metadata.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

        payload = await self._client_request_json("GET", f"/v1/jobs/{_quote_segment(job_id)}/outputs")
        return self._client_parse(domain_parse_job_outputs, payload)

    async def client_fetch_job_stdout(self, job_id: str) -> bytes:
        """Return a job's standard output; a job that has not produced any yields empty bytes.

        Args:
            job_id: Job identifier.

        Returns:
            bytes: Raw stdout contents.

        Raises:
            JobApiError: Raised for failures other than `404`.
        """

        return await self._client_request_stream_or_empty(f"/v1/jobs/{_quote_segment(job_id)}/stdout")

    async def client_fetch_job_stderr(self, job_id: str) -> bytes:
        """Return a job's standard error; a job that has not produced any yields empty bytes.

        Args:
            job_id: Job identifier.

        Returns:
            bytes: Raw stderr contents.

        Raises:
            JobApiError: Raised for failures other than `404`.
        """

        return await self._client_request_stream_or_empty(f"/v1/jobs/{_quote_segment(job_id)}/stderr")

    async def client_fetch_current_user(self) -> str:
        """Return the identifier of the authenticated user.

        Returns:
            str: User identifier.

        Raises:
            JobApiError: Raised when the backend call fails or omits the id.
        """

        payload = await self._client_request_json("GET", "/v1/users/current")
        if not isinstance(payload, dict) or not isinstance(payload.get("id"), str):
            raise JobApiResponseError("current user payload missing `id`", code=200)
        return payload["id"]

    def client_job_events_url(self) -> str:
        """Return the WebSocket URL streaming job status events.

        Returns:
            str: WebSocket URL.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return f"{self._websocket_base_url}/v1/jobs/events"

    def client_job_stdout_updates_url(self, job_id: str) -> str:
        """Return the WebSocket URL streaming a job's stdout updates.

        Args:
            job_id: Job identifier.

        Returns:
            str: WebSocket URL.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return f"{self._websocket_base_url}/v1/jobs/{_quote_segment(job_id)}/stdout/updates"

    def client_job_stderr_updates_url(self, job_id: str) -> str:
        """Return the WebSocket URL streaming a job's stderr updates.

        Args:
            job_id: Job identifier.

        Returns:
            str: WebSocket URL.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return f"{self._websocket_base_url}/v1/jobs/{_quote_segment(job_id)}/stderr/updates"

    async def _client_request_json(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
        query_parameters: dict[str, str | int] | None = None,
    ) -> object:
        """Execute one JSON request and return the decoded payload.

        Args:
            method: HTTP method.
            path: Path relative to the API prefix.
            json_body: Optional JSON request body.
            query_parameters: Optional query string parameters.

        Returns:
            object: Decoded JSON payload.

        Raises:
            JobApiError: Raised for transport failures, non-success statuses and undecodable bodies.
        """

        response = await self._client_send(
            method=method,
            path=path,
            json_body=json_body,
            query_parameters=query_parameters,
            accept="application/json",
        )
        self._client_raise_for_status(response)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise JobApiResponseError(
                f"backend returned undecodable JSON for {method} {path}",
                code=response.status_code,
            ) from error

    async def _client_request_stream_or_empty(self, path: str) -> bytes:
        response = await self._client_send(method="GET", path=path, accept="*/*")
        if response.status_code == self._NOT_FOUND_STATUS:
            return b""
        self._client_raise_for_status(response)
        return bytes(response.content)

    async def _client_send(
        self,
        method: str,
        path: str,
        accept: str,
        json_body: dict[str, Any] | None = None,
        query_parameters: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        """Send one request through the pooled client while tracking it as pending.

        Args:
            method: HTTP method.
            path: Path relative to the API prefix.
            accept: Accept header value.
            json_body: Optional JSON request body.
            query_parameters: Optional query string parameters.

        Returns:
            httpx.Response: Raw response.

        Raises:
            JobApiTimeoutError: Raised when the request times out.
            JobApiConnectionError: Raised for other transport failures.
        """

        label = f"{method} {path}"
        if self._pending_request_tracker is None:
            return await self._client_dispatch(method, path, accept, json_body, query_parameters)
        with self._pending_request_tracker.tracker_track(label):
            return await self._client_dispatch(method, path, accept, json_body, query_parameters)

    async def _client_dispatch(
        self,
        method: str,
        path: str,
        accept: str,
        json_body: dict[str, Any] | None,
        query_parameters: dict[str, str | int] | None,
    ) -> httpx.Response:
        try:
            return await self._http_client.request(
                method,
                path,
                json=json_body,
                params=query_parameters,
                headers={"Accept": accept},
            )
        except httpx.TimeoutException as error:
            raise JobApiTimeoutError(f"Request timed out: {method} {path}") from error
        except httpx.TransportError as error:
            raise JobApiConnectionError() from error

    def _client_raise_for_status(self, response: httpx.Response) -> None:
        """Raise a structured API error for non-success responses.

        Args:
            response: Raw HTTP response.

        Returns:
            None: Returns only for 2xx responses.

        Raises:
            JobApiNotFoundError: Raised for `404`.
            JobApiError: Raised for every other non-success status.
        """

        if 200 <= response.status_code < 300:
            return

        code, message = adapter_extract_error_payload(response)
        if response.status_code == self._NOT_FOUND_STATUS:
            raise JobApiNotFoundError(message, code=code)
        raise JobApiError(message, code=code)

    def _client_parse(self, parser, payload: object):
        try:
            return parser(payload)
        except (ValueError, TypeError, KeyError) as error:
            raise JobApiResponseError(f"backend payload violated contract: {error}", code=200) from error


def adapter_extract_error_payload(response: httpx.Response) -> tuple[int, str]:
    """Extract `(code, message)` from an error response body.

    Args:
        response: Non-success HTTP response.

    Returns:
        tuple[int, str]: Body-declared code and message, else HTTP status and `Error`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.status_code, "Error"

    if not isinstance(body, dict):
        return response.status_code, "Error"

    raw_code = body.get("code")
    code = raw_code if isinstance(raw_code, int) and not isinstance(raw_code, bool) else response.status_code
    raw_message = body.get("message")
    message = raw_message.strip() if isinstance(raw_message, str) and raw_message.strip() else "Error"
    return code, message


def adapter_derive_websocket_base_url(base_url: str) -> str:
    """Derive a WebSocket prefix from an HTTP(S) prefix.

    Args:
        base_url: HTTP or HTTPS base URL.

    Returns:
        str: `ws://` or `wss://` URL with the same host and path.

    Raises:
        ValueError: Raised when base_url does not use http or https.
    """

    if base_url.startswith("https://"):
        return "wss://" + base_url[len("https://"):]
    if base_url.startswith("http://"):
        return "ws://" + base_url[len("http://"):]
    raise ValueError(f"base_url must start with http:// or https:// (was {base_url})")


def _quote_segment(value: str) -> str:
    normalized_value = value.strip()
    if not normalized_value:
        raise ValueError("path identifier must not be blank")
    return quote(normalized_value, safe="")
