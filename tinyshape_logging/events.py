"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Event Naming Convention:
    <component>.<category>.<action>

    component: cache, overlay, error
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - cache.*: Shape cache lifecycle and lookups
    - overlay.*: Overlay construction decisions
    - error.*: Error conditions
    """

    # ========== Cache Events ==========
    CACHE_CONFIGURED = "cache.configured"
    """Shape cache created with its final capacity."""

    CACHE_CONFIGURE_IGNORED = "cache.configure_ignored"
    """Configure called after the cache already existed (first writer wins)."""

    CACHE_HIT = "cache.hit"
    """Fingerprint found in the cache."""

    CACHE_MISS = "cache.miss"
    """Fingerprint not cached, resource constructed."""

    CACHE_EVICTED = "cache.evicted"
    """Least-recently-used entry dropped to make room."""

    CACHE_BYPASS = "cache.bypass"
    """Fresh construction requested, cache left untouched."""

    CACHE_BUILD_SHARED = "cache.build_shared"
    """Caller reused a concurrent in-flight construction."""

    CACHE_CLEARED = "cache.cleared"
    """All entries dropped."""

    # ========== Overlay Events ==========
    OVERLAY_DEGRADED = "overlay.degraded"
    """Overlay requested but the platform cannot render it."""

    OVERLAY_STATE_MAP_SYNTHESIZED = "overlay.state_map_synthesized"
    """Overlay requested without an explicit state color map."""

    # ========== Error Events ==========
    CONSTRUCTION_ERROR = "error.construction"
    """Construction engine refused to build a resource."""

    CONFIG_ERROR = "error.config"
    """Configuration or resource file could not be loaded."""


# Event categories for filtering
CACHE_EVENTS = {
    LogEvent.CACHE_CONFIGURED,
    LogEvent.CACHE_CONFIGURE_IGNORED,
    LogEvent.CACHE_HIT,
    LogEvent.CACHE_MISS,
    LogEvent.CACHE_EVICTED,
    LogEvent.CACHE_BYPASS,
    LogEvent.CACHE_BUILD_SHARED,
    LogEvent.CACHE_CLEARED,
}

OVERLAY_EVENTS = {
    LogEvent.OVERLAY_DEGRADED,
    LogEvent.OVERLAY_STATE_MAP_SYNTHESIZED,
}

ERROR_EVENTS = {
    LogEvent.CONSTRUCTION_ERROR,
    LogEvent.CONFIG_ERROR,
}
