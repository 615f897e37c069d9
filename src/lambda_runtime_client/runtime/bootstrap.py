"""
Process Bootstrap

Entry point for a custom runtime ``bootstrap`` executable. Resolves the
handler named by ``_HANDLER`` and serves invocations with it.
"""

import importlib
import sys
from typing import Optional

from aws_lambda_powertools import Logger

from lambda_runtime_client.config.settings import Settings, get_settings
from lambda_runtime_client.models.result import Failure
from lambda_runtime_client.runtime.loop import Handler, build_client, run
from lambda_runtime_client.utils.exceptions import ConfigurationError, RuntimeClientError

logger = Logger()


def load_handler(handler_spec: Optional[str], task_root: Optional[str] = None) -> Handler:
    """
    Import a handler from a ``module.function`` spec.

    Args:
        handler_spec: Handler spec, e.g. ``handler.greet`` or ``pkg.mod.greet``
        task_root: Directory prepended to sys.path before importing

    Returns:
        The handler callable

    Raises:
        ConfigurationError: If the handler spec is malformed or cannot be loaded;
            an import-time failure of the handler module is kept as ``__cause__``
    """
    if not handler_spec or "." not in handler_spec:
        raise ConfigurationError(
            f"Bad handler spec {handler_spec!r}, expected module.function",
            error_type="Runtime.MalformedHandlerName",
            details={"handler": handler_spec},
        )

    if task_root and task_root not in sys.path:
        sys.path.insert(0, task_root)

    module_name, function_name = handler_spec.rsplit(".", 1)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Unable to import module {module_name!r}: {str(e)}",
            error_type="Runtime.ImportModuleError",
            details={"handler": handler_spec},
        ) from e
    except SyntaxError as e:
        raise ConfigurationError(
            f"Syntax error in module {module_name!r}: {str(e)}",
            error_type="Runtime.UserCodeSyntaxError",
            details={"handler": handler_spec},
        ) from e
    except Exception as e:
        # Raised by the module's top-level code; reported under its own type
        raise ConfigurationError(
            f"Module {module_name!r} failed during import: {type(e).__name__}: {str(e)}",
            error_type=type(e).__name__,
            details={"handler": handler_spec},
        ) from e

    handler = getattr(module, function_name, None)
    if not callable(handler):
        raise ConfigurationError(
            f"Handler {function_name!r} missing or not callable in module {module_name!r}",
            error_type="Runtime.HandlerNotFound",
            details={"handler": handler_spec},
        )
    return handler


def build_init_failure(error: ConfigurationError) -> Failure:
    """
    Build the Failure posted to the init-error endpoint.

    Stack frames come from the underlying import failure when there is one.
    """
    cause = error.__cause__
    stack_trace = ()
    if cause is not None:
        stack_trace = Failure.from_exception(cause).stack_trace
    return Failure(error_type=error.error_type, error_message=error.message, stack_trace=stack_trace)


def report_init_error(settings: Settings, error: ConfigurationError) -> None:
    """Post an initialization failure to the init-error endpoint, best effort."""
    try:
        client = build_client(settings)
        client.post_init_error(build_init_failure(error))
    except RuntimeClientError as e:
        logger.error(f"Failed to report init error: {e.message}")


def main() -> None:
    """Load settings and the handler, then run the invocation loop."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical(f"Runtime configuration error: {e.message}")
        sys.exit(1)

    logger.setLevel(settings.log_level.upper())

    try:
        handler = load_handler(settings.handler, settings.task_root)
    except ConfigurationError as e:
        logger.exception("Handler initialization failed", extra={"error_type": e.error_type})
        report_init_error(settings, e)
        sys.exit(1)

    logger.info("Starting runtime loop", extra={"handler": settings.handler})
    run(handler, settings=settings)
