"""Runtime configuration for fetching and parsing EPUB sources.

Environment Configuration:
    EPUBKIT_HTTP_TIMEOUT: Seconds to wait on a URL download (default 30)
    EPUBKIT_USER_AGENT: User-Agent header sent with downloads
    EPUBKIT_MAX_ARCHIVE_BYTES: Reject larger sources; unset or 0 means no limit
    EPUBKIT_FOLLOW_REDIRECTS: Follow HTTP redirects (default true)
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from epubkit.errors import ConfigError

DEFAULT_USER_AGENT = "epubkit/0.1"


class ParserConfig(BaseSettings):
    """Configuration for :func:`epubkit.open_epub`."""

    model_config = SettingsConfigDict(env_prefix="EPUBKIT_", frozen=True)

    http_timeout: float = Field(default=30.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    max_archive_bytes: int | None = Field(default=None, ge=0)
    follow_redirects: bool = True

    @field_validator("max_archive_bytes")
    @classmethod
    def _zero_is_unlimited(cls, value: int | None) -> int | None:
        return value or None

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Load the config, raising ConfigError on a malformed variable."""
        try:
            return cls()
        except ValidationError as e:
            raise ConfigError(f"invalid EPUBKIT_* setting: {e}") from e
