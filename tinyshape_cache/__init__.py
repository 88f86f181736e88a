"""
tinyshape_cache - Fingerprint-keyed shape cache

This package caches realized shape resources so repeated requests with
identical visual parameters reuse one instance.

Architecture:
- ShapeCacheService: get-or-construct with per-fingerprint compute-once
- ShapeCacheHolder: process-wide first-writer-wins handle
- LruStore: bounded least-recently-used storage
- ShapeCacheConfig: configuration management (YAML)

Threading Model:
- Any number of caller threads may materialize concurrently
- Construction happens outside the cache lock
"""

from tinyshape_cache.config import DEFAULT_CAPACITY, OverlayPolicy, ShapeCacheConfig
from tinyshape_cache.lru import LruStore
from tinyshape_cache.service import (
    ShapeCacheHolder,
    ShapeCacheService,
    configure,
    get_service,
    setup,
)

__all__ = [
    "DEFAULT_CAPACITY",
    "OverlayPolicy",
    "ShapeCacheConfig",
    "LruStore",
    "ShapeCacheHolder",
    "ShapeCacheService",
    "configure",
    "get_service",
    "setup",
]
