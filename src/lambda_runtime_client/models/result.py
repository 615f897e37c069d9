"""
Invocation Results

A handler returns exactly one of two result variants. The wire payload
and content type of each variant are derived from its fields.
"""

import traceback
from dataclasses import dataclass
from typing import Tuple, Union

from lambda_runtime_client.utils.error_envelope import ERROR_CONTENT_TYPE, encode_error_envelope


class LambdaError(Exception):
    """
    Base class for errors a handler reports back to the Runtime API.

    Subclasses set ``error_type`` (the wire ``errorType``) and usually a
    ``default_message``.
    """

    error_type: str = None
    default_message: str = ""

    def __init__(self, message: str = None, error_type: str = None):
        self.message = message or self.default_message or self.__class__.__name__
        super().__init__(self.message)
        if error_type:
            self.error_type = error_type
        elif not self.error_type:
            self.error_type = self.__class__.__name__


@dataclass(frozen=True)
class Success:
    """Successful handler outcome, posted verbatim to the response endpoint."""

    payload: bytes = b""
    content_type: str = "application/json"


@dataclass(frozen=True)
class Failure:
    """Failed handler outcome, posted as an error envelope."""

    error_type: str
    error_message: str
    stack_trace: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "stack_trace", tuple(self.stack_trace or ()))

    @property
    def payload(self) -> bytes:
        return encode_error_envelope(self.error_type, self.error_message, self.stack_trace)

    @property
    def content_type(self) -> str:
        return ERROR_CONTENT_TYPE

    @classmethod
    def from_error(cls, error: LambdaError) -> "Failure":
        """Build a Failure from a handler-defined error, without stack frames."""
        return cls(error_type=error.error_type, error_message=error.message)

    @classmethod
    def from_exception(cls, exc: BaseException, include_stack_trace: bool = True) -> "Failure":
        """
        Build a Failure from any exception.

        Args:
            exc: Exception raised while producing the handler payload
            include_stack_trace: Whether to attach the exception's traceback frames

        Returns:
            Failure whose error type is ``exc.error_type`` when present,
            otherwise the exception class name
        """
        error_type = getattr(exc, "error_type", None) or type(exc).__name__
        error_message = getattr(exc, "message", None) or str(exc)
        stack_trace = ()
        if include_stack_trace and exc.__traceback__ is not None:
            stack_trace = tuple(
                frame.rstrip("\n") for frame in traceback.format_tb(exc.__traceback__)
            )
        return cls(error_type=error_type, error_message=error_message, stack_trace=stack_trace)


Result = Union[Success, Failure]
