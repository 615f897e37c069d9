"""
Configuration Settings

Centralized configuration management using environment variables.
"""

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from lambda_runtime_client.utils.exceptions import ConfigurationError

RETRY_SCOPES = ("invocation", "process")


class Settings(BaseSettings):
    """Runtime client settings loaded from environment variables."""

    # Runtime API
    runtime_api: str = Field(
        ...,
        alias="AWS_LAMBDA_RUNTIME_API",
        description="host:port of the Runtime API",
    )
    handler: Optional[str] = Field(
        default=None,
        alias="_HANDLER",
        description="Handler to run, as module.function",
    )
    task_root: Optional[str] = Field(default=None, alias="LAMBDA_TASK_ROOT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Function metadata
    function_name: str = Field(default="", alias="AWS_LAMBDA_FUNCTION_NAME")
    function_version: str = Field(default="", alias="AWS_LAMBDA_FUNCTION_VERSION")
    memory_limit_in_mb: int = Field(default=0, alias="AWS_LAMBDA_FUNCTION_MEMORY_SIZE")
    log_group_name: str = Field(default="", alias="AWS_LAMBDA_LOG_GROUP_NAME")
    log_stream_name: str = Field(default="", alias="AWS_LAMBDA_LOG_STREAM_NAME")

    # Operational Settings
    max_retry_count: int = Field(
        default=3,
        alias="MAX_RETRY_COUNT",
        ge=1,
        description="Failed Runtime API exchanges tolerated before the process exits",
    )
    retry_scope: str = Field(
        default="invocation",
        alias="RETRY_SCOPE",
        pattern="^(invocation|process)$",
        description="'invocation' resets the budget after each posted result, "
        "'process' counts failures over the whole process lifetime",
    )
    request_timeout: float = Field(
        default=30.0,
        alias="REQUEST_TIMEOUT",
        description="Timeout in seconds for result posts",
    )
    connect_timeout: float = Field(
        default=5.0,
        alias="CONNECT_TIMEOUT",
        description="Connect timeout in seconds; the next-invocation read never times out",
    )

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


def get_settings() -> Settings:
    """
    Get application settings instance.

    Returns:
        Settings instance with values loaded from environment

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid runtime configuration: {', '.join(fields)}",
            details={"errors": e.errors()},
        ) from e
