"""Engine settings using pydantic-settings.

The nested groups mirror the settings object of the host now-playing
server (``features.lyrics.enabled``, ``timeouts.metadata``,
``version.server``) so the engine can be handed either one.
"""

from functools import cache
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]


def _package_version() -> str:
    try:
        return version("nowlyrics")
    except PackageNotFoundError:
        # Running from a source checkout
        return "unknown"


class LyricsFeature(BaseModel):
    enabled: bool = Field(default=True, description="Resolve synced lyrics")


class FeatureSettings(BaseModel):
    lyrics: LyricsFeature = Field(default_factory=LyricsFeature)


class TimeoutSettings(BaseModel):
    metadata: int = Field(
        default=1000, ge=0, description="Device metadata poll interval (ms)"
    )


class VersionSettings(BaseModel):
    server: str = Field(
        default_factory=_package_version, description="Reported server version"
    )


class LyricsSettings(BaseModel):
    """lrclib.net lookup and cache configuration.

    Attributes:
        base_url: Root URL of the lrclib.net API.
        request_timeout: Per-request HTTP timeout in seconds.
        supported_sources: Track sources eligible for lyrics (lowercase).
        cache_ttl_seconds: Lifetime of a confirmed match.
        negative_cache_ttl_seconds: Lifetime of a confirmed "no match".
    """

    base_url: str = "https://lrclib.net"
    request_timeout: float = Field(default=10.0, gt=0)
    supported_sources: list[str] = Field(default=["tidal"])
    cache_ttl_seconds: int = Field(default=6 * 60 * 60, gt=0)
    negative_cache_ttl_seconds: int = Field(default=10 * 60, gt=0)

    @field_validator("supported_sources")
    @classmethod
    def _lowercase_sources(cls, v: list[str]) -> list[str]:
        return [source.strip().lower() for source in v]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NOWLYRICS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    features: FeatureSettings = Field(default_factory=FeatureSettings)
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    version: VersionSettings = Field(default_factory=VersionSettings)
    lyrics: LyricsSettings = Field(default_factory=LyricsSettings)

    log_level: LogLevel = Field(default="WARNING", description="CLI log level")

    @property
    def lyrics_enabled(self) -> bool:
        return self.features.lyrics.enabled

    @property
    def user_agent(self) -> str:
        """User-Agent sent to lrclib.net, identifying the running server."""
        server_version = self.version.server or "unknown"
        return f"WiiMNowPlaying/{server_version} (+https://github.com)"


@cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
