"""
Error Envelope Codec

Serializes structured errors into the JSON shape the Runtime API
expects on the error and init-error endpoints.
"""

import json
from typing import Optional, Sequence

ERROR_CONTENT_TYPE = "application/json"


def build_error_envelope(
    error_type: str, error_message: str, stack_trace: Optional[Sequence[str]] = None
) -> dict:
    """
    Build the error envelope dictionary.

    Key order is part of the wire format: errorType, errorMessage, stackTrace.

    Args:
        error_type: Machine-readable error type
        error_message: Human-readable error message
        stack_trace: Optional stack frames, outermost first

    Returns:
        Error envelope dictionary
    """
    return {
        "errorType": error_type,
        "errorMessage": error_message,
        "stackTrace": list(stack_trace or []),
    }


def encode_error_envelope(
    error_type: str, error_message: str, stack_trace: Optional[Sequence[str]] = None
) -> bytes:
    """
    Encode an error envelope as compact UTF-8 JSON.

    Returns:
        Envelope bytes, e.g. b'{"errorType":"x","errorMessage":"y","stackTrace":[]}'
    """
    envelope = build_error_envelope(error_type, error_message, stack_trace)
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
