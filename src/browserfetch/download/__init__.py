"""
browserfetch Download Subsystem

Resolves Chromium and Firefox release feeds into normalized Version records
and rebuilds the matching artifact URLs.

Core Components:
- interfaces: Identifiers and data structures
- metadata: Vendor platform/channel naming tables
- async_client: aiohttp feed client
- cache: TTL fetch cache and its stores
- version: Version comparison utilities
- resolver: Release resolution and artifact URLs
"""

from .async_client import AsyncFeedClient
from .cache import FetchCache, JsonFileStore, KeyValueStore, MemoryStore
from .interfaces import (
    CacheEntry,
    ChromiumRelease,
    FirefoxRelease,
    PlatformId,
    RawReleaseRecord,
    Vendor,
    Version,
)
from .resolver import ReleaseResolver
from .version import VersionManager

__all__ = [
    # Interfaces
    "CacheEntry",
    "ChromiumRelease",
    "FirefoxRelease",
    "PlatformId",
    "RawReleaseRecord",
    "Vendor",
    "Version",
    # Core components
    "AsyncFeedClient",
    "FetchCache",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "ReleaseResolver",
    "VersionManager",
]
