"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from m3uscope.domain.entities import PlaylistLimits

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class ProbingConfig(BaseModel):
    """Channel health probing (YAML section: probing.*)."""

    concurrency: int = Field(
        default=5,
        ge=1,
        description="Batch window size (max simultaneous channel probes).",
    )
    timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Per-probe timeout for batch checks.",
    )
    single_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Probe timeout for ad-hoc single channel checks.",
    )
    max_redirects: int = Field(
        default=3,
        ge=0,
        description="Redirects followed by a probe.",
    )
    window_deadline_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Optional bound for a whole batch window. None = unbounded.",
    )


class LimitsConfig(BaseModel):
    """Size and bound limits (YAML section: limits.*)."""

    max_url_length: int = Field(default=2048, gt=0)
    max_channels_to_check: int = Field(
        default=100,
        ge=1,
        description="Upper bound for maxChannelsToCheck per request.",
    )
    default_channels_to_check: int = Field(default=50, ge=1)
    max_playlist_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Downloads larger than this are aborted.",
    )
    max_name_length: int = Field(default=200, gt=0)
    max_group_length: int = Field(default=100, gt=0)
    max_groups_in_result: int = Field(default=50, gt=0)
    max_channels_in_result: int = Field(default=200, gt=0)

    @model_validator(mode="after")
    def _check_default_within_max(self) -> "LimitsConfig":
        if self.default_channels_to_check > self.max_channels_to_check:
            raise ValueError(
                "default_channels_to_check must be <= max_channels_to_check"
            )
        return self


class ApiConfig(BaseModel):
    """HTTP API plumbing (YAML section: api.*)."""

    rate_limit_rpm: int = Field(
        default=30,
        ge=0,
        description="Requests per minute per IP for /api. 0 = unlimited.",
    )
    analysis_rate_limit_rpm: int = Field(
        default=10,
        ge=0,
        description="Requests per minute per IP for /api/analyze. 0 = unlimited.",
    )
    allowed_origin: str = Field(
        default="*",
        description="CORS allowed origin.",
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/probing/limits/logging/api).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="m3uscope", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for playlist downloads and probes.",
    )
    http_fetch_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_fetch_timeout_seconds",
            AliasPath("http", "fetch_timeout_seconds"),
        ),
        description="Timeout for playlist downloads (analyze/fetch).",
    )
    http_validate_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_validate_timeout_seconds",
            AliasPath("http", "validate_timeout_seconds"),
        ),
        description="Timeout for playlist downloads during URL validation.",
    )
    http_max_redirects: int = Field(
        default=5,
        validation_alias=AliasChoices(
            "http_max_redirects",
            AliasPath("http", "max_redirects"),
        ),
        description="Redirects followed when downloading a playlist.",
    )
    http_https_upgrade: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_https_upgrade",
            AliasPath("http", "https_upgrade"),
        ),
        description="Try the https:// variant of http:// playlist URLs first.",
    )
    http_https_upgrade_timeout_seconds: float = Field(
        default=3.0,
        validation_alias=AliasChoices(
            "http_https_upgrade_timeout_seconds",
            AliasPath("http", "https_upgrade_timeout_seconds"),
        ),
        description="Timeout for the HTTPS upgrade HEAD check.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    probing: ProbingConfig = Field(default_factory=ProbingConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator(
        "http_fetch_timeout_seconds",
        "http_validate_timeout_seconds",
        "http_https_upgrade_timeout_seconds",
    )
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http timeouts must be > 0")
        return v

    @field_validator("http_max_redirects")
    @classmethod
    def _validate_max_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_max_redirects must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_limits(self) -> PlaylistLimits:
        """Build the domain limits value object."""
        return PlaylistLimits(**self.limits.model_dump())

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "user_agent": self.http_user_agent,
                "fetch_timeout_seconds": self.http_fetch_timeout_seconds,
                "validate_timeout_seconds": self.http_validate_timeout_seconds,
                "max_redirects": self.http_max_redirects,
                "https_upgrade": self.http_https_upgrade,
                "https_upgrade_timeout_seconds": (
                    self.http_https_upgrade_timeout_seconds
                ),
            },
            "probing": self.probing.model_dump(),
            "limits": self.limits.model_dump(),
            "logging": {"level": self.log_level, "format": self.log_format},
            "api": self.api.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read M3USCOPE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - M3USCOPE_HTTP_FETCH_TIMEOUT_SECONDS
    - M3USCOPE_PROBE_CONCURRENCY
    - M3USCOPE_MAX_CHANNELS_TO_CHECK
    - M3USCOPE_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="M3USCOPE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_user_agent: Optional[str] = None
    http_fetch_timeout_seconds: Optional[float] = None
    http_validate_timeout_seconds: Optional[float] = None
    http_max_redirects: Optional[int] = None
    http_https_upgrade: Optional[bool] = None

    probe_concurrency: Optional[int] = None
    probe_timeout_seconds: Optional[float] = None
    probe_single_timeout_seconds: Optional[float] = None
    probe_window_deadline_seconds: Optional[float] = None

    max_channels_to_check: Optional[int] = None
    max_playlist_bytes: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    api_rate_limit_rpm: Optional[int] = None
    api_analysis_rate_limit_rpm: Optional[int] = None
    api_allowed_origin: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
