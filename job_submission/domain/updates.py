"""Tagged-union result types produced by input editors and the request aggregator.

Code outside this module observes which variant is held only through
`input_update_visit` and `request_update_visit`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

from .models import JobRequest

T = TypeVar("T")


@dataclass(frozen=True)
class InputValueUpdate:
    """Input editor produced a usable value.

    Attributes:
        value: Raw value submitted for the expected input.
    """

    value: Any


@dataclass(frozen=True)
class InputMissingUpdate:
    """Input editor holds no value."""


@dataclass(frozen=True)
class InputErrorsUpdate:
    """Input editor holds an invalid value.

    Attributes:
        errors: Human-readable validation messages.
    """

    errors: tuple[str, ...]


InputEditorUpdate = Union[InputValueUpdate, InputMissingUpdate, InputErrorsUpdate]


@dataclass(frozen=True)
class RequestValueUpdate:
    """Aggregated request is complete and submittable.

    Attributes:
        request: Submittable job request.
    """

    request: JobRequest


@dataclass(frozen=True)
class RequestErrorsUpdate:
    """Aggregated request cannot be submitted.

    Attributes:
        errors: Ordered validation messages.
    """

    errors: tuple[str, ...]


JobRequestEditorUpdate = Union[RequestValueUpdate, RequestErrorsUpdate]


def input_update_value(value: Any) -> InputEditorUpdate:
    """Build a Value input update.

    Args:
        value: Raw input value.

    Returns:
        InputEditorUpdate: Value variant.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return InputValueUpdate(value=value)


def input_update_missing() -> InputEditorUpdate:
    """Build a Missing input update.

    Returns:
        InputEditorUpdate: Missing variant.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return InputMissingUpdate()


def input_update_errors(errors: list[str] | tuple[str, ...]) -> InputEditorUpdate:
    """Build an Errors input update.

    Args:
        errors: Validation messages.

    Returns:
        InputEditorUpdate: Errors variant.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return InputErrorsUpdate(errors=tuple(errors))


def input_update_visit(
    update: InputEditorUpdate,
    on_value: Callable[[Any], T],
    on_missing: Callable[[], T],
    on_errors: Callable[[list[str]], T],
) -> T:
    """Dispatch on the held variant and return the matching handler's result.

    Args:
        update: Input editor update.
        on_value: Handler receiving the value.
        on_missing: Handler for the missing variant.
        on_errors: Handler receiving the error list.

    Returns:
        T: Result of the invoked handler.

    Raises:
        TypeError: Raised when update is not an input editor update variant.
    """

    if isinstance(update, InputValueUpdate):
        return on_value(update.value)
    if isinstance(update, InputMissingUpdate):
        return on_missing()
    if isinstance(update, InputErrorsUpdate):
        return on_errors(list(update.errors))
    raise TypeError(f"unsupported input editor update type={type(update).__name__}")


def request_update_value(request: JobRequest) -> JobRequestEditorUpdate:
    """Build a Value request update.

    Args:
        request: Submittable job request.

    Returns:
        JobRequestEditorUpdate: Value variant.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return RequestValueUpdate(request=request)


def request_update_errors(errors: list[str] | tuple[str, ...]) -> JobRequestEditorUpdate:
    """Build an Errors request update.

    Args:
        errors: Ordered validation messages.

    Returns:
        JobRequestEditorUpdate: Errors variant.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return RequestErrorsUpdate(errors=tuple(errors))


def request_update_visit(
    update: JobRequestEditorUpdate,
    on_value: Callable[[JobRequest], T],
    on_errors: Callable[[list[str]], T],
) -> T:
    """Dispatch on the held variant and return the matching handler's result.

    Args:
        update: Aggregated request update.
        on_value: Handler receiving the submittable request.
        on_errors: Handler receiving the error list.

    Returns:
        T: Result of the invoked handler.

    Raises:
        TypeError: Raised when update is not a request update variant.
    """

    if isinstance(update, RequestValueUpdate):
        return on_value(update.request)
    if isinstance(update, RequestErrorsUpdate):
        return on_errors(list(update.errors))
    raise TypeError(f"unsupported job request editor update type={type(update).__name__}")
