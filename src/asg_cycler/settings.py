# src/asg_cycler/settings.py
from typing import Optional, Dict, Any
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from asg_cycler.models import StopAction
from asg_cycler.task import TaskFailure


class Settings(BaseSettings):
    """
    Single source of truth for all asg-cycler settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from asg_cycler.settings import get_settings
        settings = get_settings()
        region = settings.aws_region
    """

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Override endpoint, e.g. a moto server for local runs"
    )

    # Cycler behaviour
    default_stop_action: str = Field(
        default="default",
        description="Stop action used when none is given: default, terminate or stop"
    )

    dryrun: bool = Field(
        default=False,
        description="Log mutating actions instead of executing them"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @validator('default_stop_action')
    def validate_default_stop_action(cls, v):
        """Reject unknown stop actions at load time."""
        try:
            return StopAction.parse(v).value
        except TaskFailure as e:
            raise ValueError(str(e))

    @validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level is one of the standard logging levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return level

    def client_kwargs(self, region: Optional[str] = None) -> Dict[str, Any]:
        """Keyword arguments for boto3.client built from these settings."""
        kwargs: Dict[str, Any] = {'region_name': region or self.aws_region}
        if self.aws_access_key_id:
            kwargs['aws_access_key_id'] = self.aws_access_key_id
        if self.aws_secret_access_key:
            kwargs['aws_secret_access_key'] = self.aws_secret_access_key
        if self.aws_endpoint_url:
            kwargs['endpoint_url'] = self.aws_endpoint_url
        return kwargs

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASG_CYCLER_",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
