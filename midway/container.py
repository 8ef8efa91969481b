"""Service wiring.

A small registry mapping a key (usually a port Protocol or a service
class) to a factory. ``create_default()`` binds every port to the
adapter selected by configuration, so swapping the Mapbox adapters
for offline ones or a test fake is one ``register()`` call.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass
class _Binding:
    factory: Callable[[], Any]
    singleton: bool
    instance: Any = _UNSET


@dataclass
class Container:
    """Registry of factories keyed by port or service type.

    Usage:
        container = Container.create_default()
        service = container.resolve(MidpointService)

        # In tests
        container.register(DurationOraclePort, lambda: FakeOracle())
        container.clear_singletons()

    Attributes:
        config: Configuration used by ``create_default`` factories
    """

    config: AppConfig = field(default_factory=get_config)

    _bindings: Dict[Any, _Binding] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        key: Any,
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Bind ``key`` to ``factory``, replacing any earlier binding.

        Singletons are built on first ``resolve`` and then reused;
        other bindings call the factory every time.
        """
        with self._lock:
            self._bindings[key] = _Binding(factory=factory, singleton=singleton)

    def resolve(self, key: Any) -> Any:
        """Instance bound to ``key``.

        Raises:
            KeyError: If nothing is bound to ``key``.
        """
        with self._lock:
            binding = self._bindings.get(key)
            if binding is None:
                raise KeyError(f"Nothing registered for {key!r}")
            if not binding.singleton:
                return binding.factory()
            if binding.instance is _UNSET:
                binding.instance = binding.factory()
            return binding.instance

    def is_registered(self, key: Any) -> bool:
        return key in self._bindings

    def clear_singletons(self) -> None:
        """Forget built singletons; the next resolve rebuilds them."""
        with self._lock:
            for binding in self._bindings.values():
                binding.instance = _UNSET

    def clear_all(self) -> None:
        """Drop every binding."""
        with self._lock:
            self._bindings.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default bindings.

        The Mapbox adapters are used only when an access token is
        configured; otherwise routing falls back to the straight-line
        oracle and places search returns nothing.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.places import MapboxPlacesClient, NullPlacesClient
        from .adapters.rendering import InMemoryMapSurface
        from .adapters.routing import MapboxDirectionsOracle, StraightLineOracle
        from .ports.cache import CachePort
        from .ports.places import PlacesPort
        from .ports.rendering import MapSurfacePort
        from .ports.routing import DurationOraclePort
        from .services import (
            EquidistantResolver,
            MapSession,
            MidpointService,
            POILocator,
        )

        config = config or get_config()
        container = cls(config=config)

        # Directions cache
        container.register(
            CachePort,
            lambda: InMemoryCache(
                default_ttl_seconds=config.routing.cache_ttl_seconds,
                max_size=config.routing.cache_max_size,
                name="directions",
            ),
        )

        # Duration oracle based on config
        def create_oracle() -> DurationOraclePort:
            if config.routing.provider == "mapbox" and config.mapbox.has_token:
                return MapboxDirectionsOracle(
                    mapbox=config.mapbox,
                    config=config.routing,
                    cache=container.resolve(CachePort),
                )
            if config.routing.provider == "mapbox":
                logger.warning(
                    "No Mapbox access token, using straight-line estimates",
                    extra={"setting": "MIDWAY_MAPBOX_ACCESS_TOKEN"},
                )
            return StraightLineOracle(config.routing)

        container.register(DurationOraclePort, create_oracle)

        # Places
        def create_places() -> PlacesPort:
            if config.mapbox.has_token:
                return MapboxPlacesClient(
                    mapbox=config.mapbox,
                    config=config.places,
                    base_url=config.routing.base_url,
                )
            return NullPlacesClient()

        container.register(PlacesPort, create_places)

        # Rendering
        container.register(MapSurfacePort, lambda: InMemoryMapSurface())
        container.register(
            MapSession,
            lambda: MapSession(
                surface=container.resolve(MapSurfacePort),
                config=config.map,
            ),
        )

        # Services
        container.register(
            EquidistantResolver,
            lambda: EquidistantResolver.from_config(
                container.resolve(DurationOraclePort), config.resolver
            ),
        )
        container.register(
            POILocator,
            lambda: POILocator.from_config(
                container.resolve(PlacesPort), config.places
            ),
        )

        def create_midpoint_service() -> MidpointService:
            return MidpointService(
                oracle=container.resolve(DurationOraclePort),
                resolver=container.resolve(EquidistantResolver),
                session=container.resolve(MapSession),
                poi_locator=container.resolve(POILocator),
            )

        container.register(MidpointService, create_midpoint_service)

        return container


_default: Optional[Container] = None
_default_lock = threading.Lock()


def get_container() -> Container:
    """Process-wide container, built from ``get_config()`` on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Container.create_default()
    return _default


def reset_container() -> None:
    """Discard the process-wide container (tests)."""
    global _default
    with _default_lock:
        if _default is not None:
            _default.clear_all()
        _default = None
