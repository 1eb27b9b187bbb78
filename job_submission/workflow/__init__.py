"""Job submission workflow: aggregation, states, transitions and the controller."""

from .aggregator import aggregator_recompute
from .controller import REQUEST_DOWNLOAD_FILENAME, JobSubmissionWorkflow, WorkflowContext
from .errors import AggregatorInvariantError, UnknownExpectedInputError, WorkflowStateError
from .states import (
	STEP_CURRENT_SPEC,
	STEP_JOB_DETAILS,
	STEP_JOB_INPUTS,
	STEP_ORIGINAL_SPEC,
	EditingState,
	LoadingExistingJobState,
	LoadingSpecsState,
	LoadingSpecState,
	NoSpecsAvailableState,
	SubmittedState,
	WorkflowHints,
	WorkflowState,
)

__all__ = [
	"REQUEST_DOWNLOAD_FILENAME",
	"STEP_CURRENT_SPEC",
	"STEP_JOB_DETAILS",
	"STEP_JOB_INPUTS",
	"STEP_ORIGINAL_SPEC",
	"AggregatorInvariantError",
	"EditingState",
	"JobSubmissionWorkflow",
	"LoadingExistingJobState",
	"LoadingSpecState",
	"LoadingSpecsState",
	"NoSpecsAvailableState",
	"SubmittedState",
	"UnknownExpectedInputError",
	"WorkflowContext",
	"WorkflowHints",
	"WorkflowState",
	"WorkflowStateError",
	"aggregator_recompute",
]
