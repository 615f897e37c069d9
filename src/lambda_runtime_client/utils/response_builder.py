"""
Response Builder Utility

Helpers for handlers to produce consistent Success and Failure results.
"""

import functools
import json
from typing import Any, Callable, Optional, Sequence

from aws_lambda_powertools import Logger

from lambda_runtime_client.models.result import Failure, Success

logger = Logger(child=True)


def build_response(body: Any, content_type: str = "application/json") -> Success:
    """
    Build a Success result.

    Args:
        body: bytes or str are sent as-is; anything else is JSON encoded
        content_type: Content type of the payload

    Returns:
        Success result
    """
    if isinstance(body, bytes):
        payload = body
    elif isinstance(body, str):
        payload = body.encode("utf-8")
    else:
        payload = json.dumps(body, default=str).encode("utf-8")

    return Success(payload=payload, content_type=content_type)


def build_error_response(
    error_type: str,
    error_message: str,
    stack_trace: Optional[Sequence[str]] = None,
) -> Failure:
    """
    Build a Failure result.

    Args:
        error_type: Machine-readable error type
        error_message: Human-readable error message
        stack_trace: Optional stack frames

    Returns:
        Failure result
    """
    return Failure(
        error_type=error_type,
        error_message=error_message,
        stack_trace=tuple(stack_trace or ()),
    )


def catch_errors(handler: Callable = None, *, include_stack_trace: bool = True):
    """
    Decorate a handler so exceptions it raises become Failure results.

    The runtime loop does not catch handler exceptions; handlers that may
    raise should be wrapped with this decorator.

    Usage:
        @catch_errors
        def handler(context): ...

        @catch_errors(include_stack_trace=False)
        def handler(context): ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(context):
            try:
                return func(context)
            except Exception as e:
                logger.exception(
                    "Handler raised an exception",
                    extra={"request_id": getattr(context, "request_id", None)},
                )
                return Failure.from_exception(e, include_stack_trace=include_stack_trace)

        return wrapper

    if handler is not None:
        return decorator(handler)
    return decorator
