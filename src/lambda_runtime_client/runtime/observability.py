"""
Retry Observability Hooks

Callables invoked by the runtime loop each time a failed Runtime API
exchange consumes one retry. Hooks only observe; they never change
what the loop does next.
"""

from typing import Callable

from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit

from lambda_runtime_client.utils.exceptions import RuntimeClientError

logger = Logger(child=True)

RetryHook = Callable[[RuntimeClientError, int, int], None]


def describe_error(error: RuntimeClientError) -> dict:
    """Flatten a runtime client error into structured log fields."""
    fields = {"error_type": type(error).__name__, "error_message": error.message}
    header = getattr(error, "header", None)
    if header:
        fields["header"] = header
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        fields["status_code"] = status_code
    return fields


def log_retry(error: RuntimeClientError, attempt: int, max_retry_count: int) -> None:
    """Default hook: one structured warning per consumed retry."""
    logger.warning(
        f"Runtime API exchange failed ({attempt}/{max_retry_count})",
        extra={"attempt": attempt, "max_retry_count": max_retry_count, **describe_error(error)},
    )


def metrics_retry_hook(metrics: Metrics, name: str = "RuntimeApiRetry") -> RetryHook:
    """
    Build a hook that logs the retry and emits a count metric for it.

    Args:
        metrics: Powertools Metrics instance (namespace configured by the caller)
        name: Metric name

    Returns:
        Retry hook flushing one EMF record per consumed retry
    """

    def hook(error: RuntimeClientError, attempt: int, max_retry_count: int) -> None:
        log_retry(error, attempt, max_retry_count)
        metrics.add_dimension(name="ErrorType", value=type(error).__name__)
        metrics.add_metric(name=name, unit=MetricUnit.Count, value=1)
        metrics.flush_metrics()

    return hook
