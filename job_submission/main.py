"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or drives one job submission from the command line.
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import uvicorn

from job_submission.api.serialization import api_serialize_workflow_state
from job_submission.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_job_api_client,
    bootstrap_create_workflow,
)
from job_submission.config import AppSettings, config_load_settings
from job_submission.domain import request_update_visit
from job_submission.editors import InvalidEditError, editor_encode_file
from job_submission.workflow import (
    EditingState,
    SubmittedState,
    UnknownExpectedInputError,
    WorkflowHints,
)

LOGGER = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a submission does not succeed.
    """

    argument_parser = argparse.ArgumentParser(description="Job submission runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "submit"),
        help="Runtime command: `api` starts server, `submit` drives one job submission workflow",
        type=str,
    )
    argument_parser.add_argument("--spec", dest="spec", type=str, help="Initial job spec id for `submit`")
    argument_parser.add_argument(
        "--based-on",
        dest="based_on",
        type=str,
        help="Existing job id whose name and inputs seed the new request for `submit`",
    )
    argument_parser.add_argument("--name", dest="name", type=str, help="Job name override for `submit`")
    argument_parser.add_argument(
        "--input",
        dest="inputs",
        action="append",
        default=[],
        metavar="ID=VALUE",
        help="Input edit for `submit`; VALUE is text, a JSON array or object, or `@path` to upload a file",
    )
    argument_parser.add_argument(
        "--download",
        dest="download_path",
        type=str,
        help="Write the complete request JSON to this path",
    )
    argument_parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Print the complete request instead of submitting it",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    logging.basicConfig(level=settings.log_level)

    if parsed_arguments.command == "submit":
        exit_code = asyncio.run(main_run_submission(settings, parsed_arguments))
        if exit_code != 0:
            raise SystemExit(exit_code)
        return

    application = bootstrap_create_application()
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


async def main_run_submission(settings: AppSettings, parsed_arguments: argparse.Namespace) -> int:
    """Drive one submission workflow to Submitted and print the outcome.

    Args:
        settings: Validated application settings.
        parsed_arguments: Parsed `submit` command arguments.

    Returns:
        int: Process exit code, `0` on success.

    Raises:
        ValueError: Raised when an `--input` argument is malformed.
    """

    hints = WorkflowHints(based_on_job_id=parsed_arguments.based_on, initial_spec_id=parsed_arguments.spec)
    input_edits = [main_parse_input_argument(argument) for argument in parsed_arguments.inputs]

    async with bootstrap_create_job_api_client(settings) as job_api_client:
        workflow = bootstrap_create_workflow(job_api_client=job_api_client, hints=hints)
        state = await workflow.workflow_run()
        if not isinstance(state, EditingState):
            print(json.dumps(api_serialize_workflow_state(state), indent=2))
            return 1

        try:
            if parsed_arguments.name is not None:
                workflow.workflow_change_job_name(parsed_arguments.name)
            for expected_input_id, raw_edit in input_edits:
                workflow.workflow_change_input(expected_input_id, raw_edit)
        except (UnknownExpectedInputError, InvalidEditError) as error:
            print(f"INVALID_INPUT: {error}")
            return 1

        errors = request_update_visit(
            workflow.workflow_state().aggregate,
            on_value=lambda request: [],
            on_errors=lambda request_errors: request_errors,
        )
        if errors:
            for error_message in errors:
                print("REQUEST_ERROR:", error_message)
            return 1

        request_json = workflow.workflow_download_request()
        if parsed_arguments.download_path:
            Path(parsed_arguments.download_path).write_text(request_json, encoding="utf-8")
            LOGGER.info("Request written path=%s", parsed_arguments.download_path)
        if parsed_arguments.dry_run:
            print(request_json)
            return 0

        state = await workflow.workflow_submit()

        if isinstance(state, SubmittedState):
            print("SUBMITTED:", state.job_id)
            return 0

        submission_error = state.submission_error if isinstance(state, EditingState) else None
        if submission_error is not None:
            print(f"SUBMISSION_FAILED: {submission_error.code}: {submission_error.message}")
        return 1


def main_parse_input_argument(argument: str) -> tuple[str, Any]:
    """Split one `ID=VALUE` argument into an input id and a raw edit.

    Args:
        argument: Raw command line argument.

    Returns:
        tuple[str, Any]: Expected input id and raw edit payload.

    Raises:
        ValueError: Raised when the argument has no `=` or an empty id.
    """

    expected_input_id, separator, raw_value = argument.partition("=")
    expected_input_id = expected_input_id.strip()
    if not separator or not expected_input_id:
        raise ValueError(f"input must be formatted as ID=VALUE: {argument}")

    if raw_value.startswith("@"):
        file_path = Path(raw_value[1:])
        return expected_input_id, editor_encode_file(file_path.name, file_path.read_bytes())

    if raw_value.lstrip().startswith(("[", "{")):
        try:
            return expected_input_id, json.loads(raw_value)
        except json.JSONDecodeError:
            return expected_input_id, raw_value
    return expected_input_id, raw_value


if __name__ == "__main__":
    main()
