"""Centralized configuration using Pydantic Settings.

Every tunable of the meeting-point resolver lives here so adapters and
services receive their settings by injection instead of reading the
environment themselves.

Configuration can be overridden via environment variables:
- MIDWAY_MAPBOX_ACCESS_TOKEN=pk.xxx
- MIDWAY_ROUTING_PROVIDER=straight_line
- MIDWAY_RESOLVER_SAMPLE_COUNT=50
- MIDWAY_RESOLVER_FAILURE_POLICY=discard
- MIDWAY_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MapboxConfig(BaseSettings):
    """Mapbox credentials.

    Environment variables prefixed with MIDWAY_MAPBOX_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_MAPBOX_")

    access_token: Optional[str] = None

    @property
    def has_token(self) -> bool:
        """Whether a non-empty access token is configured."""
        return bool(self.access_token and self.access_token.strip())


class RoutingConfig(BaseSettings):
    """Duration oracle configuration.

    Environment variables prefixed with MIDWAY_ROUTING_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_ROUTING_")

    provider: Literal["mapbox", "straight_line"] = "mapbox"
    base_url: str = "https://api.mapbox.com"
    timeout_seconds: float = 10.0
    # Mapbox has no public transit profile.
    transit_profile: str = "driving-traffic"
    cache_ttl_seconds: Optional[float] = 300.0
    cache_max_size: Optional[int] = 2048

    # Straight-line oracle speeds, meters per second
    driving_speed_mps: float = 13.9
    walking_speed_mps: float = 1.4
    cycling_speed_mps: float = 4.2
    transit_speed_mps: float = 8.3
    straight_line_segments: int = 100


class ResolverConfig(BaseSettings):
    """Equidistant resolver configuration.

    Environment variables prefixed with MIDWAY_RESOLVER_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_RESOLVER_")

    sample_count: int = Field(default=100, ge=1)
    failure_policy: Literal["zero", "discard"] = "zero"
    max_concurrency: Optional[int] = Field(default=None, ge=1)


class PlacesConfig(BaseSettings):
    """Nearby places search configuration.

    Environment variables prefixed with MIDWAY_PLACES_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_PLACES_")

    categories: tuple[str, ...] = ("cafe", "park", "shopping")
    limit: int = Field(default=5, ge=1)
    timeout_seconds: float = 10.0


class MapConfig(BaseSettings):
    """Map presentation hints.

    Environment variables prefixed with MIDWAY_MAP_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_MAP_")

    route_color: str = "#3b82f6"
    route_width: int = 4
    padding_top: int = 50
    padding_bottom: int = 50
    padding_left: int = 450
    padding_right: int = 50
    max_zoom: int = 15
    default_zoom: int = 12
    default_center_lng: float = 0.0
    default_center_lat: float = 0.0

    @property
    def padding(self) -> dict[str, int]:
        """Fit-bounds padding in pixels, keyed by side."""
        return {
            "top": self.padding_top,
            "bottom": self.padding_bottom,
            "left": self.padding_left,
            "right": self.padding_right,
        }


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with MIDWAY_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations are accessed via attributes:

        config = get_config()
        print(config.resolver.sample_count)
        print(config.mapbox.has_token)

    Environment variables prefixed with MIDWAY_.
    """

    model_config = SettingsConfigDict(env_prefix="MIDWAY_")

    mapbox: MapboxConfig = Field(default_factory=MapboxConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    places: PlacesConfig = Field(default_factory=PlacesConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
