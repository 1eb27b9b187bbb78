"""Typed interfaces for adapter-layer responsibilities."""

from typing import Any
from typing import Protocol

from job_submission.domain import JobCreatedResponse, JobDetails, JobRequest, JobSpec, JobSpecSummary


class JobApiClientPort(Protocol):
    """Port definition for the backend job service consumed by the submission workflow.

    Every operation raises `JobApiError` (or a subclass) when the backend call fails.
    """

    async def client_fetch_job_spec_summaries(self) -> list[JobSpecSummary]:
        """Return summaries of every job spec the backend exposes.

        Returns:
            list[JobSpecSummary]: Spec summaries in backend order.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

    async def client_fetch_job_spec(self, spec_id: str) -> JobSpec:
        """Return the current version of one job spec.

        Args:
            spec_id: Spec identifier.

        Returns:
            JobSpec: Full spec.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

    async def client_fetch_job_details(self, job_id: str) -> JobDetails:
        """Return details of an existing job.

        Args:
            job_id: Job identifier.

        Returns:
            JobDetails: Job details.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

    async def client_fetch_job_inputs(self, job_id: str) -> dict[str, Any]:
        """Return the inputs an existing job was submitted with.

        Args:
            job_id: Job identifier.

        Returns:
            dict[str, Any]: Mapping from expected input id to raw value.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

    async def client_fetch_job_spec_for_job(self, job_id: str) -> JobSpec:
        """Return the spec an existing job was originally submitted against.

        Args:
            job_id: Job identifier.

        Returns:
            JobSpec: Spec as it was at submission time.

        Raises:
            JobApiError: Raised when the backend call fails.
        """

    async def client_submit_job_request(self, request: JobRequest) -> JobCreatedResponse:
        """Submit one complete job request.

        Args:
            request: Submittable job request.

        Returns:
            JobCreatedResponse: Identifier of the created job.

        Raises:
            JobApiError: Raised when the backend rejects the request or the call fails.
        """


class JobApiHealthPort(Protocol):
    """Port definition for probing backend job service reachability."""

    def client_base_url(self) -> str:
        """Return the backend API prefix used for diagnostics.

        Returns:
            str: Base URL without trailing slash.

        Raises:
            RuntimeError: Implementations do not raise runtime errors.
        """

    async def client_fetch_job_spec_summaries(self) -> list[JobSpecSummary]:
        """Return spec summaries; used as the reachability check.

        Returns:
            list[JobSpecSummary]: Spec summaries.

        Raises:
            JobApiError: Raised when the backend is unreachable or rejects the call.
        """
