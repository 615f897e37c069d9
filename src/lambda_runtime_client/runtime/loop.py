"""
Runtime Loop

Fetches the next invocation, runs the handler against it and posts the
result, one invocation at a time, until the retry budget is spent.
"""

import sys
from typing import Callable, Optional

from aws_lambda_powertools import Logger

from lambda_runtime_client.adapters.endpoint import Endpoint
from lambda_runtime_client.adapters.runtime_api_client import RuntimeAPIClient
from lambda_runtime_client.config.settings import RETRY_SCOPES, Settings, get_settings
from lambda_runtime_client.models.invocation import InvocationContext
from lambda_runtime_client.models.result import Result
from lambda_runtime_client.runtime.observability import RetryHook, log_retry
from lambda_runtime_client.utils.exceptions import (
    ConfigurationError,
    RetryBudgetExhaustedError,
    RuntimeClientError,
)

logger = Logger(child=True)

Handler = Callable[[InvocationContext], Result]

DEFAULT_MAX_RETRY_COUNT = 3


class RuntimeLoop:
    """
    Sequential fetch, invoke, post loop.

    Every failed fetch or post consumes one retry and restarts from fetch;
    the in-flight invocation is dropped. With ``retry_scope="invocation"``
    the count resets after each successful post, so only consecutive
    failures exhaust the budget. ``retry_scope="process"`` counts failures
    over the lifetime of the loop.
    """

    def __init__(
        self,
        client: RuntimeAPIClient,
        handler: Handler,
        max_retry_count: int = DEFAULT_MAX_RETRY_COUNT,
        retry_scope: str = "invocation",
        on_retry: Optional[RetryHook] = None,
    ):
        if retry_scope not in RETRY_SCOPES:
            raise ValueError(f"Unknown retry scope: {retry_scope}")

        self.client = client
        self.handler = handler
        self.max_retry_count = max_retry_count
        self.retry_scope = retry_scope
        self.on_retry = on_retry or log_retry
        self.retry_count = 0
        self.last_error: Optional[RuntimeClientError] = None

    def run_once(self) -> bool:
        """
        Run a single fetch, invoke, post iteration.

        Handler exceptions are not caught here.

        Returns:
            True if the result was posted, False if a retry was consumed
        """
        try:
            context = self.client.next_invocation()
        except RuntimeClientError as e:
            self._consume_retry(e)
            return False

        result = self.handler(context)

        try:
            self.client.post_result(result, context.request_id)
        except RuntimeClientError as e:
            self._consume_retry(e)
            return False

        if self.retry_scope == "invocation":
            self.retry_count = 0
        return True

    def run(self) -> None:
        """
        Loop until the retry budget is exhausted.

        Raises:
            RetryBudgetExhaustedError: Once ``max_retry_count`` retries are consumed
        """
        while self.retry_count < self.max_retry_count:
            self.run_once()

        raise RetryBudgetExhaustedError(
            f"Runtime API retry budget exhausted after {self.retry_count} failures",
            attempts=self.retry_count,
            last_error=self.last_error,
        )

    def _consume_retry(self, error: RuntimeClientError) -> None:
        self.retry_count += 1
        self.last_error = error
        self.on_retry(error, self.retry_count, self.max_retry_count)


def build_client(settings: Settings) -> RuntimeAPIClient:
    """
    Create a Runtime API client from settings.

    Raises:
        ConfigurationError: If the runtime API address is not a valid host
    """
    endpoint = Endpoint.from_runtime_api(settings.runtime_api)
    return RuntimeAPIClient(
        endpoint,
        request_timeout=settings.request_timeout,
        connect_timeout=settings.connect_timeout,
        function_metadata={
            "function_name": settings.function_name,
            "function_version": settings.function_version,
            "memory_limit_in_mb": settings.memory_limit_in_mb,
            "log_group_name": settings.log_group_name,
            "log_stream_name": settings.log_stream_name,
        },
    )


def run(
    handler: Handler,
    settings: Optional[Settings] = None,
    on_retry: Optional[RetryHook] = None,
) -> None:
    """
    Serve invocations with ``handler`` until the process must be recycled.

    Never returns normally: exits the process with status 1 on a
    configuration error or once the retry budget is exhausted.

    Args:
        handler: Function mapping an InvocationContext to a Success or Failure
        settings: Optional settings; loaded from the environment when omitted
        on_retry: Optional hook called for every consumed retry
    """
    try:
        settings = settings or get_settings()
        client = build_client(settings)
    except ConfigurationError as e:
        logger.critical(f"Runtime configuration error: {e.message}")
        sys.exit(1)

    loop = RuntimeLoop(
        client,
        handler,
        max_retry_count=settings.max_retry_count,
        retry_scope=settings.retry_scope,
        on_retry=on_retry,
    )

    try:
        loop.run()
    except RetryBudgetExhaustedError as e:
        logger.critical(
            e.message,
            extra={"attempts": e.attempts, "last_error": str(e.last_error)},
        )
        sys.exit(1)
