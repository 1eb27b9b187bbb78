"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from job_submission.adapters import HttpJobApiClient, PendingRequestTracker
from job_submission.api import SubmissionSessionRegistry, create_api_application
from job_submission.config import AppSettings, config_load_settings
from job_submission.workflow import JobSubmissionWorkflow, WorkflowContext, WorkflowHints


def bootstrap_create_job_api_client(
    settings: AppSettings,
    pending_request_tracker: PendingRequestTracker | None = None,
) -> HttpJobApiClient:
    """Build the backend job service client from validated settings.

    Args:
        settings: Validated application settings.
        pending_request_tracker: Optional tracker notified of in-flight requests.

    Returns:
        HttpJobApiClient: Client bound to the configured job service.

    Raises:
        ValueError: Raised when configured URLs or timeouts are invalid.
    """

    return HttpJobApiClient(
        base_url=settings.job_api_base_url,
        request_timeout_seconds=settings.job_api_request_timeout_seconds,
        pending_request_tracker=pending_request_tracker,
        websocket_base_url=settings.job_api_websocket_base_url,
    )


def bootstrap_create_session_registry(job_api_client: HttpJobApiClient) -> SubmissionSessionRegistry:
    """Build the submission session registry sharing one backend client.

    Each session gets its own pending request tracker so `busy` reflects only
    that session's in-flight requests.

    Args:
        job_api_client: Shared backend client.

    Returns:
        SubmissionSessionRegistry: Registry creating one workflow per session.

    Raises:
        ValueError: Raised when job_api_client is None.
    """

    if job_api_client is None:
        raise ValueError("job_api_client must not be None")

    return SubmissionSessionRegistry(
        workflow_factory=lambda hints: bootstrap_create_workflow(job_api_client=job_api_client, hints=hints)
    )


def bootstrap_create_workflow(
    job_api_client: HttpJobApiClient,
    hints: WorkflowHints | None = None,
) -> JobSubmissionWorkflow:
    """Build one workflow whose `busy` flag follows its own backend requests.

    Args:
        job_api_client: Backend client.
        hints: Optional start-up hints.

    Returns:
        JobSubmissionWorkflow: Workflow in its initial LoadingSpecs state.

    Raises:
        ValueError: Raised when job_api_client is None.
    """

    if job_api_client is None:
        raise ValueError("job_api_client must not be None")

    pending_request_tracker = PendingRequestTracker()
    return JobSubmissionWorkflow(
        context=WorkflowContext(
            client=job_api_client.client_bind_tracker(pending_request_tracker),
            pending_request_tracker=pending_request_tracker,
        ),
        hints=hints,
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    job_api_client = bootstrap_create_job_api_client(settings)
    session_registry = bootstrap_create_session_registry(job_api_client)
    return create_api_application(
        settings=settings,
        job_api_client=job_api_client,
        session_registry=session_registry,
    )
