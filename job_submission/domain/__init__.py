"""Domain models used across application layer boundaries."""

from .models import (
	DEFAULT_JOB_NAME,
	ColumnSchema,
	ExpectedInput,
	JobCreatedResponse,
	JobDetails,
	JobOutput,
	JobRequest,
	JobSpec,
	JobSpecSummary,
	JobTimestamp,
	SelectOption,
	TableSchema,
)
from .payload_parsing import (
	domain_parse_expected_input,
	domain_parse_job_created_response,
	domain_parse_job_details,
	domain_parse_job_outputs,
	domain_parse_job_request,
	domain_parse_job_spec,
	domain_parse_job_spec_summaries,
	domain_parse_job_spec_summary,
)
from .timeline import WorkflowTimelineEvent, domain_build_stage_event
from .updates import (
	InputEditorUpdate,
	InputErrorsUpdate,
	InputMissingUpdate,
	InputValueUpdate,
	JobRequestEditorUpdate,
	RequestErrorsUpdate,
	RequestValueUpdate,
	input_update_errors,
	input_update_missing,
	input_update_value,
	input_update_visit,
	request_update_errors,
	request_update_value,
	request_update_visit,
)

__all__ = [
	"DEFAULT_JOB_NAME",
	"ColumnSchema",
	"ExpectedInput",
	"InputEditorUpdate",
	"InputErrorsUpdate",
	"InputMissingUpdate",
	"InputValueUpdate",
	"JobCreatedResponse",
	"JobDetails",
	"JobOutput",
	"JobRequest",
	"JobRequestEditorUpdate",
	"JobSpec",
	"JobSpecSummary",
	"JobTimestamp",
	"RequestErrorsUpdate",
	"RequestValueUpdate",
	"SelectOption",
	"TableSchema",
	"WorkflowTimelineEvent",
	"domain_build_stage_event",
	"domain_parse_expected_input",
	"domain_parse_job_created_response",
	"domain_parse_job_details",
	"domain_parse_job_outputs",
	"domain_parse_job_request",
	"domain_parse_job_spec",
	"domain_parse_job_spec_summaries",
	"domain_parse_job_spec_summary",
	"input_update_errors",
	"input_update_missing",
	"input_update_value",
	"input_update_visit",
	"request_update_errors",
	"request_update_value",
	"request_update_visit",
]
