"""
Core Interfaces for the browserfetch Download Subsystem

This module defines the identifiers and data structures shared by the
platform detector, the vendor metadata tables, the fetch cache and the
release resolver.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class Vendor(str, Enum):
    """Browser vendor; doubles as the tag of the raw release record union."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"


class PlatformId(str, Enum):
    """Operating system / architecture combination a build targets."""

    WINDOWS = "windows"
    MAC = "mac"
    MAC_ARM = "mac-arm"
    LINUX = "linux"
    # Reserved: no vendor ships a usable desktop artifact for it yet
    ANDROID = "android"


@dataclass(frozen=True)
class ChromiumRelease:
    """A record from the Chromium dash version-history feed."""

    channel: str
    """Release channel as spelled by the feed (e.g. 'Stable')"""

    platform: Optional[str]
    """Feed platform name (e.g. 'Linux', 'Mac')"""

    version: str
    """Full version string (e.g. '120.0.6099.109')"""

    time: float
    """Release time in epoch milliseconds"""

    chromium_main_branch_position: Optional[int] = None
    """Main-branch commit position the snapshot archive is stored under"""

    milestone: Optional[int] = None
    previous_version: Optional[str] = None
    hashes: Dict[str, str] = field(default_factory=dict)

    vendor = Vendor.CHROMIUM


@dataclass(frozen=True)
class FirefoxRelease:
    """A record from the Mozilla product-details feed."""

    category: str
    """Release category ('major', 'stability', 'dev' or 'esr')"""

    product: str
    """Product token ('firefox' or 'devedition')"""

    version: str
    """Version string (e.g. '120.0.1', '121.0b3', '115.5.0esr')"""

    date: str
    """Release date as 'YYYY-MM-DD'"""

    build_number: Optional[int] = None
    description: Optional[str] = None
    is_security_driven: bool = False

    vendor = Vendor.FIREFOX


RawReleaseRecord = Union[ChromiumRelease, FirefoxRelease]


@dataclass(frozen=True)
class Version:
    """A release normalized from either vendor's feed."""

    label: str
    """Human-readable display string"""

    value: str
    """Stable comparison key (branch position or version string)"""

    date: datetime
    """Timezone-aware release time"""

    full_version: str
    """Complete version string as published by the vendor"""


@dataclass(frozen=True)
class CacheEntry:
    """A cached fetch result and the window it may be served in."""

    key: str
    payload: Any
    stored_at: int
    """Epoch milliseconds at which the payload was stored"""

    ttl_seconds: float

    @property
    def expires_at(self) -> int:
        return self.stored_at + round(self.ttl_seconds * 1000)

    def is_valid(self, now_ms: int) -> bool:
        """
        Return whether the entry can be served at `now_ms` without a new fetch.

        Parameters:
            now_ms (int): Current time in epoch milliseconds.

        Returns:
            bool: `True` while `now_ms` is strictly before the expiry instant.
        """
        return now_ms < self.expires_at
