"""
Runtime API Client

Adapter for the Lambda Runtime API control plane.
Fetches invocation events, posts results, and classifies failures.
"""

import json
import os
from typing import Optional

import requests
from aws_lambda_powertools import Logger
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from lambda_runtime_client import __version__
from lambda_runtime_client.adapters.endpoint import Endpoint
from lambda_runtime_client.models.invocation import (
    InvocationContext,
    JSONValue,
    deadline_from_epoch_ms,
)
from lambda_runtime_client.models.result import Failure, Result
from lambda_runtime_client.utils.exceptions import (
    RuntimeAPIError,
    TransportError,
    UnexpectedError,
)

logger = Logger(child=True)

REQUEST_ID_HEADER = "Lambda-Runtime-Aws-Request-Id"
FUNCTION_ARN_HEADER = "Lambda-Runtime-Invoked-Function-Arn"
TRACE_ID_HEADER = "Lambda-Runtime-Trace-Id"
DEADLINE_MS_HEADER = "Lambda-Runtime-Deadline-Ms"
CLIENT_CONTEXT_HEADER = "Lambda-Runtime-Client-Context"
COGNITO_IDENTITY_HEADER = "Lambda-Runtime-Cognito-Identity"
ERROR_TYPE_HEADER = "Lambda-Runtime-Function-Error-Type"

TRACE_ID_ENV = "_X_AMZN_TRACE_ID"


def is_success_status(status_code: int) -> bool:
    """Return True for 2xx statuses; 300 is not a success."""
    return 200 <= status_code < 300


def parse_json_header(value: Optional[str]) -> Optional[JSONValue]:
    """
    Parse an optional JSON-bearing header.

    Returns:
        Parsed JSON value, or None when the header is absent or not valid JSON
    """
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError:
        logger.debug("Ignoring malformed JSON header value", extra={"value": value})
        return None


class RuntimeAPIClient:
    """
    Client for Runtime API exchanges.

    Every call is a single blocking HTTP exchange that either returns or
    raises a RuntimeClientError subclass. Retrying is the runtime loop's job.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        session: Optional[requests.Session] = None,
        request_timeout: float = 30.0,
        connect_timeout: float = 5.0,
        function_metadata: Optional[dict] = None,
    ):
        """
        Initialize Runtime API client.

        Args:
            endpoint: Resolved Runtime API endpoint
            session: Optional preconfigured requests session
            request_timeout: Timeout in seconds for result posts
            connect_timeout: Connect timeout in seconds for every request
            function_metadata: Function fields copied onto each InvocationContext
        """
        self.endpoint = endpoint
        self.request_timeout = request_timeout
        self.connect_timeout = connect_timeout
        self.function_metadata = dict(function_metadata or {})
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """
        Create requests session without transport-level retries.

        Returns:
            Configured requests.Session
        """
        session = requests.Session()

        # The runtime loop owns the retry budget
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        session.mount("http://", adapter)

        session.headers.update({"User-Agent": f"lambda-runtime-client/{__version__}"})

        return session

    def next_invocation(self) -> InvocationContext:
        """
        Long-poll the Runtime API for the next invocation event.

        Blocks until the control plane has an event ready.

        Returns:
            InvocationContext built from the response

        Raises:
            TransportError: If no response could be obtained
            RuntimeAPIError: If the Runtime API answered with a non-2xx status
            UnexpectedError: If a required header is missing or malformed
        """
        url = self.endpoint.next_invocation_url
        try:
            response = self.session.get(url, timeout=(self.connect_timeout, None))
        except requests.RequestException as e:
            raise TransportError(f"Next invocation request failed: {str(e)}") from e

        if not is_success_status(response.status_code):
            raise RuntimeAPIError(
                f"Next invocation returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={"body": response.text},
            )

        context = self._build_context(response)
        logger.debug(
            "Received invocation",
            extra={"request_id": context.request_id, "payload_size": len(context.payload)},
        )

        os.environ[TRACE_ID_ENV] = context.trace_id

        return context

    def _build_context(self, response: requests.Response) -> InvocationContext:
        headers = response.headers

        request_id = self._required_header(headers, REQUEST_ID_HEADER)
        function_arn = self._required_header(headers, FUNCTION_ARN_HEADER)
        trace_id = self._required_header(headers, TRACE_ID_HEADER)
        deadline_value = self._required_header(headers, DEADLINE_MS_HEADER)

        try:
            deadline = deadline_from_epoch_ms(int(deadline_value))
        except (ValueError, OverflowError) as e:
            raise UnexpectedError(
                f"Malformed response header: {DEADLINE_MS_HEADER}",
                header=DEADLINE_MS_HEADER,
                details={"value": deadline_value},
            ) from e

        return InvocationContext(
            request_id=request_id,
            function_arn=function_arn,
            trace_id=trace_id,
            deadline=deadline,
            payload=response.content or b"",
            client_context=parse_json_header(headers.get(CLIENT_CONTEXT_HEADER)),
            identity_context=parse_json_header(headers.get(COGNITO_IDENTITY_HEADER)),
            **self.function_metadata,
        )

    @staticmethod
    def _required_header(headers, name: str) -> str:
        value = headers.get(name)
        if value is None:
            raise UnexpectedError(f"Missing response header: {name}", header=name)
        return value

    def post_result(self, result: Result, request_id: str) -> None:
        """
        Post a handler result for an invocation.

        Args:
            result: Success or Failure returned by the handler
            request_id: Request id of the invocation being answered

        Raises:
            TransportError: If no response could be obtained
            RuntimeAPIError: If the Runtime API answered with a non-2xx status
        """
        if isinstance(result, Failure):
            url = self.endpoint.error_url(request_id)
        else:
            url = self.endpoint.response_url(request_id)

        self._post(url, result)
        logger.debug(
            "Posted invocation result",
            extra={"request_id": request_id, "result": type(result).__name__},
        )

    def post_init_error(self, failure: Failure) -> None:
        """
        Report a failure that happened before the first invocation.

        Raises:
            TransportError: If no response could be obtained
            RuntimeAPIError: If the Runtime API answered with a non-2xx status
        """
        self._post(self.endpoint.init_error_url, failure)

    def _post(self, url: str, result: Result) -> None:
        body = result.payload
        headers = {
            "Content-Type": result.content_type,
            "Content-Length": str(len(body)),
            # Cleared so the body is always sent in one piece with a known length
            "Expect": None,
            "Transfer-Encoding": None,
        }
        if isinstance(result, Failure):
            headers[ERROR_TYPE_HEADER] = result.error_type

        try:
            response = self.session.post(
                url,
                data=body,
                headers=headers,
                timeout=(self.connect_timeout, self.request_timeout),
            )
        except requests.RequestException as e:
            raise TransportError(f"POST {url} failed: {str(e)}") from e

        if not is_success_status(response.status_code):
            raise RuntimeAPIError(
                f"POST {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={"body": response.text},
            )
