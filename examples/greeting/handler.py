"""
Greeting Handler

Example function: decodes ``{"firstName": ...}`` and answers with a
greeting. Run it with ``_HANDLER=handler.greet`` and
``LAMBDA_TASK_ROOT`` pointing at this directory.
"""

import json

from lambda_runtime_client import Failure, InvocationContext, LambdaError, Success


class InvalidPayloadError(LambdaError):
    error_type = "invalidPayload"
    default_message = "Payload is invalid"


def greet(context: InvocationContext):
    try:
        user = json.loads(context.payload or b"")
        first_name = user["firstName"]
    except (ValueError, TypeError, KeyError):
        return Failure.from_error(InvalidPayloadError())

    if not isinstance(first_name, str):
        return Failure.from_error(InvalidPayloadError())

    payload = json.dumps({"message": f"Hello {first_name}"}, separators=(",", ":"))
    return Success(payload=payload.encode("utf-8"), content_type="application/json")
