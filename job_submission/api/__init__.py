"""API layer package for FastAPI application and route composition."""

from .application import create_api_application
from .sessions import SubmissionSessionNotFoundError, SubmissionSessionRegistry

__all__ = [
	"SubmissionSessionNotFoundError",
	"SubmissionSessionRegistry",
	"create_api_application",
]
