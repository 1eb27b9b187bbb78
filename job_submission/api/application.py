"""FastAPI application factory for the job submission service.

This module composes the health and submission session routers.
"""

from fastapi import FastAPI

from job_submission.adapters import JobApiHealthPort
from job_submission.config import AppSettings

from .routers import api_create_health_router, api_create_submission_router
from .sessions import SubmissionSessionRegistry


def create_api_application(
    settings: AppSettings,
    job_api_client: JobApiHealthPort,
    session_registry: SubmissionSessionRegistry,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        job_api_client: Backend job service client used by health endpoints.
        session_registry: Registry of submission workflows for session APIs.

    Returns:
        FastAPI: Framework application instance with foundation metadata.

    Raises:
        ValueError: Raised when router dependencies are invalid.
    """
    application = FastAPI(title="Job Submission")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification.

        Returns:
            dict[str, str]: Service name, readiness marker and environment.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "job-submission",
            "status": "foundation-ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(job_api_client=job_api_client))
    application.include_router(api_create_submission_router(session_registry=session_registry))

    return application
