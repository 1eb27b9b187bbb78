"""Health endpoint router composition for app and backend job service checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from job_submission.adapters import JobApiError, JobApiHealthPort


def api_create_health_router(job_api_client: JobApiHealthPort) -> APIRouter:
    """Create health-check router with app and backend reachability status.

    Args:
        job_api_client: Backend client used for the reachability check.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when job_api_client is invalid.
    """

    if job_api_client is None:
        raise ValueError("job_api_client must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    async def api_health_status() -> JSONResponse:
        """Return application and backend job service health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: Backend failures are reported as `degraded`, not raised.
        """

        try:
            summaries = await job_api_client.client_fetch_job_spec_summaries()
            payload = {
                "status": "ok",
                "app": "up",
                "job_service": "up",
                "detail": f"{len(summaries)} job specs available",
                "target": job_api_client.client_base_url(),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        except JobApiError as error:
            payload = {
                "status": "degraded",
                "app": "up",
                "job_service": "down",
                "detail": f"{error.code}: {error.message}",
                "target": job_api_client.client_base_url(),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return router
