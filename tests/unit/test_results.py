"""
Unit tests for result variants and the error envelope
"""

import json
from datetime import datetime, timedelta, timezone

from lambda_runtime_client.models.invocation import InvocationContext
from lambda_runtime_client.models.result import Failure, LambdaError, Success
from lambda_runtime_client.utils.error_envelope import build_error_envelope, encode_error_envelope


class InvalidPayloadError(LambdaError):
    error_type = "invalidPayload"
    default_message = "Payload is invalid"


def test_failure_serializes_to_exact_envelope():
    """Test the failure wire payload and content type."""
    failure = Failure(error_type="invalidPayload", error_message="Payload is invalid")

    assert failure.payload == (
        b'{"errorType":"invalidPayload","errorMessage":"Payload is invalid","stackTrace":[]}'
    )
    assert failure.content_type == "application/json"


def test_envelope_key_order_and_stack_trace():
    """Test envelope keys keep their order and stack frames are included."""
    envelope = build_error_envelope("Boom", "it broke", ["frame 1", "frame 2"])

    assert list(envelope) == ["errorType", "errorMessage", "stackTrace"]
    assert json.loads(encode_error_envelope("Boom", "it broke", ["frame 1", "frame 2"])) == {
        "errorType": "Boom",
        "errorMessage": "it broke",
        "stackTrace": ["frame 1", "frame 2"],
    }


def test_envelope_defaults_stack_trace_to_empty_list():
    """Test a missing stack trace is encoded as []."""
    assert build_error_envelope("Boom", "it broke")["stackTrace"] == []


def test_success_payload_is_verbatim():
    """Test the success payload and content type are the variant's own fields."""
    result = Success(payload=b'{"message":"Hello Ada"}', content_type="application/json")

    assert result.payload == b'{"message":"Hello Ada"}'
    assert result.content_type == "application/json"


def test_success_defaults():
    """Test an empty success result."""
    result = Success()

    assert result.payload == b""
    assert result.content_type == "application/json"


def test_failure_from_lambda_error():
    """Test building a failure from a handler-defined error."""
    failure = Failure.from_error(InvalidPayloadError())

    assert failure == Failure(error_type="invalidPayload", error_message="Payload is invalid")


def test_lambda_error_defaults_to_class_name():
    """Test error type falls back to the class name."""
    error = LambdaError("something went wrong")

    assert error.error_type == "LambdaError"
    assert error.message == "something went wrong"


def test_failure_from_exception_includes_traceback():
    """Test building a failure from a raised exception."""
    try:
        raise KeyError("firstName")
    except KeyError as e:
        failure = Failure.from_exception(e)

    assert failure.error_type == "KeyError"
    assert failure.error_message == "'firstName'"
    assert len(failure.stack_trace) == 1
    assert "raise KeyError" in failure.stack_trace[0]


def test_failure_from_exception_without_traceback():
    """Test stack frames can be left out."""
    try:
        raise InvalidPayloadError()
    except InvalidPayloadError as e:
        failure = Failure.from_exception(e, include_stack_trace=False)

    assert failure.error_type == "invalidPayload"
    assert failure.error_message == "Payload is invalid"
    assert failure.stack_trace == ()


def test_remaining_time_is_derived_from_deadline():
    """Test remaining time counts down to the deadline and goes negative after it."""
    now = datetime.now(timezone.utc)
    future = InvocationContext(
        request_id="abc123",
        function_arn="arn",
        trace_id="trace",
        deadline=now + timedelta(seconds=30),
    )
    past = InvocationContext(
        request_id="abc123",
        function_arn="arn",
        trace_id="trace",
        deadline=now - timedelta(seconds=30),
    )

    assert timedelta(seconds=25) < future.remaining_time <= timedelta(seconds=30)
    assert 25000 < future.get_remaining_time_in_millis() <= 30000
    assert past.remaining_time < timedelta(0)
    assert past.get_remaining_time_in_millis() < 0
