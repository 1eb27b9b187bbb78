"""Typed exceptions raised by the submission workflow."""


class WorkflowStateError(RuntimeError):
    """Raised when an operation is not valid for the current workflow state."""


class UnknownExpectedInputError(LookupError):
    """Raised when an edit names an expected input the current spec does not declare."""


class AggregatorInvariantError(RuntimeError):
    """Raised when aggregation inputs violate the one-update-per-declared-input invariant."""
