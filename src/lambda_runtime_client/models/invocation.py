"""
Invocation Context

Value object carrying one event's payload and per-invocation metadata
as delivered by the next-invocation response.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Union

JSONValue = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def deadline_from_epoch_ms(deadline_ms: int) -> datetime:
    """Convert an epoch-millisecond value into an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=deadline_ms)


@dataclass(frozen=True)
class InvocationContext:
    """
    One fetched invocation.

    Attribute names follow the Python Lambda context where one exists
    (``aws_request_id``, ``invoked_function_arn``, ``function_name``, ...)
    so the object can be passed to code expecting a LambdaContext.
    """

    request_id: str
    function_arn: str
    trace_id: str
    deadline: datetime
    payload: bytes = b""
    client_context: Optional[JSONValue] = None
    identity_context: Optional[JSONValue] = None

    # Function metadata from the execution environment
    function_name: str = ""
    function_version: str = ""
    memory_limit_in_mb: int = 0
    log_group_name: str = ""
    log_stream_name: str = ""

    @property
    def aws_request_id(self) -> str:
        return self.request_id

    @property
    def invoked_function_arn(self) -> str:
        return self.function_arn

    @property
    def remaining_time(self) -> timedelta:
        """Time left until the deadline; negative once it has passed."""
        return self.deadline - datetime.now(timezone.utc)

    def get_remaining_time_in_millis(self) -> int:
        return int(self.remaining_time / timedelta(milliseconds=1))
