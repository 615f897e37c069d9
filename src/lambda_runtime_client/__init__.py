"""
Lambda Runtime API client for custom Python runtimes.
"""

__version__ = "0.1.0"

from lambda_runtime_client.adapters.endpoint import Endpoint  # noqa: E402
from lambda_runtime_client.models.invocation import InvocationContext  # noqa: E402
from lambda_runtime_client.models.result import Failure, LambdaError, Success  # noqa: E402
from lambda_runtime_client.runtime.loop import RuntimeLoop, run  # noqa: E402

__all__ = [
    "Endpoint",
    "Failure",
    "InvocationContext",
    "LambdaError",
    "RuntimeLoop",
    "Success",
    "run",
]
