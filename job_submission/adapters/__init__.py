"""Adapter layer package for backend job service boundaries."""

from .interfaces import JobApiClientPort, JobApiHealthPort
from .job_api_client import HttpJobApiClient, adapter_derive_websocket_base_url, adapter_extract_error_payload
from .job_api_errors import (
	CONNECTION_ERROR_CODE,
	JobApiConnectionError,
	JobApiError,
	JobApiNotFoundError,
	JobApiResponseError,
	JobApiTimeoutError,
)
from .job_events import IDLE_TIMEOUT_CLOSE_CODE, JobEventSubscription
from .pending_requests import PendingRequestTracker

__all__ = [
	"CONNECTION_ERROR_CODE",
	"IDLE_TIMEOUT_CLOSE_CODE",
	"HttpJobApiClient",
	"JobApiClientPort",
	"JobApiConnectionError",
	"JobApiError",
	"JobApiHealthPort",
	"JobApiNotFoundError",
	"JobApiResponseError",
	"JobApiTimeoutError",
	"JobEventSubscription",
	"PendingRequestTracker",
	"adapter_derive_websocket_base_url",
	"adapter_extract_error_payload",
]
