"""
Shape Cache Service - get-or-construct over a bounded LRU store.

This module provides ShapeCacheService, which maps shape fingerprints to
realized resources, and ShapeCacheHolder, the process-wide first-writer-wins
handle behind the module level configure()/get_service()/setup() helpers.

Thread Safety:
- One threading.Lock guards the LRU store, the in-flight table and counters
- Construction runs outside the lock; concurrent misses on the same
  fingerprint wait for the first caller's build instead of repeating it
- Nested materialize() calls from the construction engine are safe
  (the lock is never held while building)
"""

import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from tinyshape_cache.config import DEFAULT_CAPACITY, OverlayPolicy, ShapeCacheConfig
from tinyshape_cache.lru import LruStore
from tinyshape_geometry.fingerprint import fingerprint
from tinyshape_geometry.params import ShapeBuilder, ShapeParameters
from tinyshape_logging import LogEvent, StructuredLogger, create_logger
from tinyshape_render.engine import ConstructionEngine
from tinyshape_render.interfaces import Platform, ShapeRenderer


@dataclass
class PendingBuild:
    """Construction in progress for one fingerprint."""

    done: threading.Event = field(default_factory=threading.Event)
    result: Any = None
    error: Optional[Exception] = None


class ShapeCacheService:
    """
    Get-or-construct cache for shape resources.

    Lookup flow (materialize):
    1. Fingerprint the parameters (overlay fields only under KEYED_BY_EFFECT)
    2. Hit -> return the cached instance and mark it most recently used
    3. Miss -> first caller builds, concurrent callers wait and share
    4. Insert the result, evicting the least recently used entry at capacity

    Bypassed calls (explicit, or overlay requests under
    UNKEYED_FORCED_BYPASS) always build a fresh resource and never touch
    the store.

    Usage:
        service = ShapeCacheService(ShapeCacheConfig(capacity=64))
        drawable = service.builder().solid(0xFF2196F3).corner_radius(8).materialize()
    """

    def __init__(
        self,
        config: Optional[ShapeCacheConfig] = None,
        renderer: Optional[ShapeRenderer] = None,
        platform: Optional[Platform] = None,
        engine: Optional[ConstructionEngine] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize cache service.

        Args:
            config: Cache configuration (default: ShapeCacheConfig())
            renderer: Rendering primitive handed to the default engine
            platform: Platform override (default: config.platform)
            engine: Prebuilt construction engine (renderer/platform ignored)
            logger: Structured logger (default: "cache" component)
        """
        self.config = config or ShapeCacheConfig()
        self.logger = logger or create_logger("cache", level=self.config.logging_level)
        self.engine = engine or ConstructionEngine(
            renderer=renderer,
            platform=platform or self.config.platform,
            mode=self.config.construction_mode,
            default_size_dp=self.config.default_size_dp,
            pressed_adjust_fraction=self.config.pressed_adjust_fraction,
            logger=create_logger("engine", level=self.config.logging_level),
        )

        self._store = LruStore(self.config.capacity)
        self._pending: Dict[str, PendingBuild] = {}
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._bypasses = 0
        self._shared_builds = 0

        self.logger.info(
            event=LogEvent.CACHE_CONFIGURED,
            message="Shape cache ready",
            metadata={
                'capacity': self.config.capacity,
                'overlay_policy': self.config.overlay_policy.value,
                'construction_mode': self.config.construction_mode.value,
            },
        )

    @property
    def capacity(self) -> int:
        return self._store.capacity

    def builder(self) -> ShapeBuilder:
        """Fluent builder bound to this service."""
        return ShapeBuilder(self)

    def key_for(self, params: ShapeParameters) -> str:
        """Fingerprint under the configured overlay policy."""
        keyed = self.config.overlay_policy == OverlayPolicy.KEYED_BY_EFFECT
        return fingerprint(params, include_overlay=keyed)

    def materialize(self, params: ShapeParameters, bypass_cache: bool = False) -> Any:
        """
        Return the resource for params, constructing it on a miss.

        Args:
            params: Immutable shape parameters
            bypass_cache: Build a fresh resource, content layer included,
                without reading or writing the cache

        Returns:
            Cached instance on a hit, otherwise the newly built resource

        Raises:
            ConfigurationError: Strict-mode overlay without color information
                (nothing is inserted)
        """
        forced = (
            params.overlay_requested
            and self.config.overlay_policy == OverlayPolicy.UNKEYED_FORCED_BYPASS
        )
        key = self.key_for(params)

        if bypass_cache or forced:
            with self._lock:
                self._bypasses += 1
            self.logger.debug(
                event=LogEvent.CACHE_BYPASS,
                message="Building uncached resource",
                metadata={'fingerprint': key, 'overlay': params.overlay_requested, 'forced': forced},
            )
            if bypass_cache:
                # Caller asked for a fresh resource: the content layer is never shared
                return self.engine.build(params)
            # Composite stays uncached; its plain content layer is shared
            return self.engine.build(params, content_provider=self.materialize)

        with self._lock:
            cached = self._store.get(key)
            if cached is not None:
                self._hits += 1
            else:
                pending = self._pending.get(key)
                owner = pending is None
                if owner:
                    pending = PendingBuild()
                    self._pending[key] = pending
                    self._misses += 1
                else:
                    self._shared_builds += 1

        if cached is not None:
            self.logger.debug(
                event=LogEvent.CACHE_HIT,
                message="Shape served from cache",
                metadata={'fingerprint': key},
            )
            return cached

        if not owner:
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            self.logger.debug(
                event=LogEvent.CACHE_BUILD_SHARED,
                message="Reused concurrent construction",
                metadata={'fingerprint': key},
            )
            return pending.result

        return self._build_and_insert(key, params, pending)

    def _build_and_insert(self, key: str, params: ShapeParameters, pending: PendingBuild) -> Any:
        try:
            resource = self.engine.build(params)
        except Exception as e:
            with self._lock:
                del self._pending[key]
            pending.error = e
            pending.done.set()
            raise

        with self._lock:
            evicted = self._store.put(key, resource)
            del self._pending[key]
            if evicted is not None:
                self._evictions += 1
        pending.result = resource
        pending.done.set()

        self.logger.debug(
            event=LogEvent.CACHE_MISS,
            message="Shape constructed and cached",
            metadata={'fingerprint': key},
        )
        if evicted is not None:
            self.logger.debug(
                event=LogEvent.CACHE_EVICTED,
                message="Evicted least recently used shape",
                metadata={'fingerprint': evicted[0], 'capacity': self.capacity},
            )
        return resource

    # Introspection ---------------------------------------------------------------
    def contains(self, params: ShapeParameters) -> bool:
        """Whether params are cached (does not count as a touch)."""
        key = self.key_for(params)
        with self._lock:
            return key in self._store

    def peek(self, params: ShapeParameters) -> Optional[Any]:
        """Cached resource for params without touching it, or None."""
        key = self.key_for(params)
        with self._lock:
            return self._store.peek(key)

    def keys(self) -> List[str]:
        """Cached fingerprints from least to most recently used (snapshot)."""
        with self._lock:
            return self._store.keys()

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, int]:
        """Counters snapshot."""
        with self._lock:
            return {
                'size': len(self._store),
                'capacity': self._store.capacity,
                'hits': self._hits,
                'misses': self._misses,
                'evictions': self._evictions,
                'bypasses': self._bypasses,
                'shared_builds': self._shared_builds,
            }

    def clear(self) -> None:
        """
        Drop every cached entry.

        In-flight constructions still complete and insert their result.
        """
        with self._lock:
            dropped = len(self._store)
            self._store.clear()
        self.logger.info(
            event=LogEvent.CACHE_CLEARED,
            message="Shape cache cleared",
            metadata={'dropped': dropped},
        )


class ShapeCacheHolder:
    """
    Process-wide handle to a single ShapeCacheService.

    The first configure() (or the first get_service(), with the default
    capacity) creates the service; later configure() calls return it
    unchanged. Creation is a single lock-guarded check-and-set, so racing
    first users converge on one instance.

    Usage:
        holder = ShapeCacheHolder()
        holder.configure(capacity=50)
        holder.configure(capacity=10)   # ignored, capacity stays 50
        holder.get_service().capacity   # 50
    """

    def __init__(self):
        self._service: Optional[ShapeCacheService] = None
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return self._service is not None

    def configure(
        self,
        capacity: Optional[int] = None,
        config: Optional[ShapeCacheConfig] = None,
        renderer: Optional[ShapeRenderer] = None,
        platform: Optional[Platform] = None,
    ) -> ShapeCacheService:
        """
        Create the process-wide service if it does not exist yet.

        Args:
            capacity: Cache capacity (non-positive or None -> default 30);
                overrides config.capacity when both are given
            config: Full configuration
            renderer: Rendering primitive for the engine
            platform: Platform override

        Returns:
            The process-wide service (existing one if already configured)
        """
        with self._lock:
            if self._service is not None:
                if capacity is not None or config is not None:
                    self._service.logger.warning(
                        event=LogEvent.CACHE_CONFIGURE_IGNORED,
                        message="Shape cache already configured, keeping first configuration",
                        metadata={
                            'capacity': self._service.capacity,
                            'requested_capacity': capacity if capacity is not None else config.capacity,
                        },
                    )
                return self._service

            if config is None:
                config = ShapeCacheConfig(capacity=capacity if capacity is not None else DEFAULT_CAPACITY)
            elif capacity is not None:
                config = replace(config, capacity=capacity)

            self._service = ShapeCacheService(config=config, renderer=renderer, platform=platform)
            return self._service

    def get_service(self) -> ShapeCacheService:
        """The process-wide service, created with defaults on first use."""
        service = self._service
        if service is not None:
            return service
        return self.configure()


_holder = ShapeCacheHolder()


def configure(
    capacity: Optional[int] = None,
    config: Optional[ShapeCacheConfig] = None,
    renderer: Optional[ShapeRenderer] = None,
    platform: Optional[Platform] = None,
) -> ShapeCacheService:
    """Configure the process-wide shape cache (first writer wins)."""
    return _holder.configure(capacity=capacity, config=config, renderer=renderer, platform=platform)


def get_service() -> ShapeCacheService:
    """Process-wide shape cache, created with capacity 30 on first use."""
    return _holder.get_service()


def setup() -> ShapeBuilder:
    """Fluent builder bound to the process-wide shape cache."""
    return ShapeBuilder(get_service())
