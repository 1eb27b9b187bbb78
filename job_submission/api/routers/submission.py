"""Submission session API router driving job submission workflows over HTTP."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from job_submission.editors import InvalidEditError
from job_submission.workflow import (
    REQUEST_DOWNLOAD_FILENAME,
    JobSubmissionWorkflow,
    SubmittedState,
    UnknownExpectedInputError,
    WorkflowHints,
    WorkflowStateError,
)

from ..serialization import api_serialize_workflow_state
from ..sessions import SubmissionSessionNotFoundError, SubmissionSessionRegistry


class SubmissionCreateBody(BaseModel):
    """Body of `POST /submissions`."""

    based_on: str | None = None
    spec: str | None = None


class JobNameBody(BaseModel):
    name: str


class InputValueBody(BaseModel):
    value: Any = None


class InputImportBody(BaseModel):
    text: str


class SpecSelectionBody(BaseModel):
    spec: str


def api_create_submission_router(session_registry: SubmissionSessionRegistry) -> APIRouter:
    """Create router exposing submission session endpoints.

    Args:
        session_registry: Registry holding one workflow per session.

    Returns:
        APIRouter: Router exposing `/submissions` APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if session_registry is None:
        raise ValueError("session_registry must not be None")

    router = APIRouter(prefix="/submissions", tags=["submissions"])

    @router.post("")
    async def api_submission_create(body: SubmissionCreateBody | None = None) -> JSONResponse:
        """Start a submission workflow and drive it until it settles.

        Returns:
            JSONResponse: `201` with the session id and settled state.

        Raises:
            RuntimeError: Fetch failures are reported inside the state payload.
        """

        request_body = body or SubmissionCreateBody()
        hints = WorkflowHints(
            based_on_job_id=_api_optional_identifier(request_body.based_on),
            initial_spec_id=_api_optional_identifier(request_body.spec),
        )
        session_id, workflow = session_registry.session_create(hints)
        settled_state = await workflow.workflow_run()
        payload = {"submission_id": session_id, **api_serialize_workflow_state(settled_state)}
        return JSONResponse(content=payload, status_code=status.HTTP_201_CREATED)

    @router.get("/{submission_id}")
    async def api_submission_detail(
        submission_id: str,
        include_timeline: bool = Query(default=False),
    ) -> JSONResponse:
        """Return the current state of one submission.

        Args:
            submission_id: Session identifier.
            include_timeline: Include the transition timeline when true.

        Returns:
            JSONResponse: State payload or `404` for unknown sessions.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        try:
            workflow = session_registry.session_get(submission_id)
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))

        payload = _api_state_payload(submission_id, workflow)
        if include_timeline:
            payload["timeline"] = workflow.workflow_timeline()
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.put("/{submission_id}/name")
    async def api_submission_change_name(submission_id: str, body: JobNameBody) -> JSONResponse:
        return _api_run_edit(submission_id, lambda workflow: workflow.workflow_change_job_name(body.name))

    @router.put("/{submission_id}/inputs/{input_id}")
    async def api_submission_change_input(submission_id: str, input_id: str, body: InputValueBody) -> JSONResponse:
        """Apply one field edit.

        Args:
            submission_id: Session identifier.
            input_id: Expected input identifier.
            body: Raw edit payload under `value`.

        Returns:
            JSONResponse: Updated state; `400` for rejected payloads, `404` for unknown
            sessions or inputs, `409` outside Editing.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        return _api_run_edit(submission_id, lambda workflow: workflow.workflow_change_input(input_id, body.value))

    @router.post("/{submission_id}/inputs/{input_id}/import")
    async def api_submission_import_values(submission_id: str, input_id: str, body: InputImportBody) -> JSONResponse:
        return _api_run_edit(submission_id, lambda workflow: workflow.workflow_import_input_values(input_id, body.text))

    @router.delete("/{submission_id}/inputs/{input_id}/values")
    async def api_submission_clear_values(submission_id: str, input_id: str) -> JSONResponse:
        return _api_run_edit(submission_id, lambda workflow: workflow.workflow_clear_input_values(input_id))

    @router.put("/{submission_id}/spec")
    async def api_submission_change_spec(submission_id: str, body: SpecSelectionBody) -> JSONResponse:
        try:
            workflow = session_registry.session_get(submission_id)
            await workflow.workflow_change_spec(body.spec)
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))
        except WorkflowStateError as error:
            return _api_error_response(status.HTTP_409_CONFLICT, "INVALID_WORKFLOW_STATE", str(error))
        except ValueError as error:
            return _api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_SPEC", str(error))
        return JSONResponse(content=_api_state_payload(submission_id, workflow), status_code=status.HTTP_200_OK)

    @router.post("/{submission_id}/retry")
    async def api_submission_retry(submission_id: str) -> JSONResponse:
        try:
            workflow = session_registry.session_get(submission_id)
            await workflow.workflow_retry()
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))
        except WorkflowStateError as error:
            return _api_error_response(status.HTTP_409_CONFLICT, "INVALID_WORKFLOW_STATE", str(error))
        return JSONResponse(content=_api_state_payload(submission_id, workflow), status_code=status.HTTP_200_OK)

    @router.post("/{submission_id}/submit")
    async def api_submission_submit(submission_id: str) -> JSONResponse:
        """Submit the current request once.

        Args:
            submission_id: Session identifier.

        Returns:
            JSONResponse: `201` when a job was created, else `200` with the current state.

        Raises:
            RuntimeError: Submission failures are reported inside the state payload.
        """

        try:
            workflow = session_registry.session_get(submission_id)
            settled_state = await workflow.workflow_submit()
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))
        except WorkflowStateError as error:
            return _api_error_response(status.HTTP_409_CONFLICT, "INVALID_WORKFLOW_STATE", str(error))

        status_code = status.HTTP_201_CREATED if isinstance(settled_state, SubmittedState) else status.HTTP_200_OK
        return JSONResponse(content=_api_state_payload(submission_id, workflow), status_code=status_code)

    @router.get("/{submission_id}/request")
    async def api_submission_download_request(submission_id: str) -> Response:
        """Download the complete request as a JSON attachment.

        Args:
            submission_id: Session identifier.

        Returns:
            Response: JSON attachment, or `409` while the request has errors.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        try:
            workflow = session_registry.session_get(submission_id)
            request_json = workflow.workflow_download_request()
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))
        except WorkflowStateError as error:
            return _api_error_response(status.HTTP_409_CONFLICT, "INVALID_WORKFLOW_STATE", str(error))

        if request_json is None:
            return _api_error_response(
                status.HTTP_409_CONFLICT,
                "REQUEST_HAS_ERRORS",
                "the request cannot be downloaded while it contains errors",
            )
        return Response(
            content=request_json,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{REQUEST_DOWNLOAD_FILENAME}"'},
        )

    def _api_run_edit(submission_id: str, operation) -> JSONResponse:
        try:
            workflow = session_registry.session_get(submission_id)
            operation(workflow)
        except SubmissionSessionNotFoundError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "SUBMISSION_NOT_FOUND", str(error))
        except UnknownExpectedInputError as error:
            return _api_error_response(status.HTTP_404_NOT_FOUND, "INPUT_NOT_FOUND", str(error))
        except WorkflowStateError as error:
            return _api_error_response(status.HTTP_409_CONFLICT, "INVALID_WORKFLOW_STATE", str(error))
        except InvalidEditError as error:
            return _api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_EDIT", str(error))
        return JSONResponse(content=_api_state_payload(submission_id, workflow), status_code=status.HTTP_200_OK)

    return router


def _api_state_payload(submission_id: str, workflow: JobSubmissionWorkflow) -> dict[str, Any]:
    return {
        "submission_id": submission_id,
        "busy": workflow.workflow_is_busy(),
        **api_serialize_workflow_state(workflow.workflow_state()),
    }


def _api_error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = {
        "status": "error",
        "code": code,
        "message": message,
    }
    return JSONResponse(content=payload, status_code=status_code)


def _api_optional_identifier(value: str | None) -> str | None:
    if value is None:
        return None
    normalized_value = value.strip()
    return normalized_value or None
