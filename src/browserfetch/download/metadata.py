"""
Vendor Metadata for the browserfetch Download Subsystem

Static lookup tables translating internal platform and channel identifiers
into each vendor's own naming: the platform name its feed expects, the
directory its archives live in and the archive filename.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

from browserfetch.exceptions import UnsupportedChannelError, UnsupportedPlatformError

from .interfaces import PlatformId, Vendor

_Key = Tuple[Vendor, PlatformId]

_C, _F = Vendor.CHROMIUM, Vendor.FIREFOX
_P = PlatformId

# Chromium has no android entries: its snapshots are not desktop archives.
API_PLATFORM_NAMES: Mapping[_Key, str] = MappingProxyType(
    {
        (_C, _P.WINDOWS): "Windows",
        (_C, _P.MAC): "Mac",
        (_C, _P.MAC_ARM): "Mac",
        (_C, _P.LINUX): "Linux",
        (_F, _P.WINDOWS): "win64",
        (_F, _P.MAC): "osx",
        (_F, _P.MAC_ARM): "osx",
        (_F, _P.LINUX): "linux64",
        (_F, _P.ANDROID): "android",
    }
)

ARTIFACT_DIR_NAMES: Mapping[_Key, str] = MappingProxyType(
    {
        (_C, _P.WINDOWS): "Win_x64",
        (_C, _P.MAC): "Mac",
        (_C, _P.MAC_ARM): "Mac_Arm",
        (_C, _P.LINUX): "Linux_x64",
        (_F, _P.WINDOWS): "win64",
        (_F, _P.MAC): "mac",
        (_F, _P.MAC_ARM): "mac",
        (_F, _P.LINUX): "linux-x86_64",
        (_F, _P.ANDROID): "android-x86_64",
    }
)

# Firefox names embed the version, so its entries are templates.
ARTIFACT_FILE_NAMES: Mapping[_Key, str] = MappingProxyType(
    {
        (_C, _P.WINDOWS): "chrome-win.zip",
        (_C, _P.MAC): "chrome-mac.zip",
        (_C, _P.MAC_ARM): "chrome-mac.zip",
        (_C, _P.LINUX): "chrome-linux.zip",
        (_F, _P.WINDOWS): "Firefox Setup {version}.exe",
        (_F, _P.MAC): "Firefox {version}.dmg",
        (_F, _P.MAC_ARM): "Firefox {version}.dmg",
        (_F, _P.LINUX): "firefox-{version}.tar.bz2",
    }
)

CHANNELS: Mapping[Vendor, Tuple[str, ...]] = MappingProxyType(
    {
        _C: ("stable", "beta", "dev", "canary"),
        _F: ("stable", "dev", "esr"),
    }
)

CHROMIUM_CHANNEL_TOKENS: Mapping[str, str] = MappingProxyType(
    {channel: channel.capitalize() for channel in CHANNELS[_C]}
)

FIREFOX_CHANNEL_CATEGORIES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "stable": ("major", "stability"),
        "dev": ("dev",),
        "esr": ("esr",),
    }
)

FIREFOX_DEV_PRODUCT = "devedition"
FIREFOX_PRODUCT = "firefox"


def _lookup(table: Mapping[_Key, str], vendor: Vendor, platform: PlatformId) -> str:
    try:
        return table[(Vendor(vendor), PlatformId(platform))]
    except (KeyError, ValueError):
        raise UnsupportedPlatformError(
            getattr(vendor, "value", vendor), getattr(platform, "value", platform)
        ) from None


def api_platform_name(vendor: Vendor, platform: PlatformId) -> str:
    """
    Return the platform name the vendor's release feed expects.

    Raises:
        UnsupportedPlatformError: If the vendor has no mapping for `platform`.
    """
    return _lookup(API_PLATFORM_NAMES, vendor, platform)


def artifact_dir_name(vendor: Vendor, platform: PlatformId) -> str:
    """
    Return the directory the vendor stores archives for `platform` under.

    Raises:
        UnsupportedPlatformError: If the vendor has no mapping for `platform`.
    """
    return _lookup(ARTIFACT_DIR_NAMES, vendor, platform)


def artifact_file_name(vendor: Vendor, platform: PlatformId) -> str:
    """
    Return the archive filename for `platform`.

    Firefox names are templates with a `{version}` placeholder.

    Raises:
        UnsupportedPlatformError: If the vendor has no mapping for `platform`.
    """
    return _lookup(ARTIFACT_FILE_NAMES, vendor, platform)


def supported_channels(vendor: Vendor) -> Tuple[str, ...]:
    return CHANNELS[Vendor(vendor)]


def validate_channel(vendor: Vendor, channel: str) -> str:
    """
    Check that `channel` belongs to the vendor's channel set.

    Returns:
        str: The channel, unchanged.

    Raises:
        UnsupportedChannelError: If the vendor does not publish that channel.
    """
    if channel not in supported_channels(vendor):
        raise UnsupportedChannelError(Vendor(vendor).value, str(channel))
    return channel


def chromium_channel_token(channel: str) -> str:
    """Return the channel name as spelled by the Chromium feed (e.g. 'Stable')."""
    return CHROMIUM_CHANNEL_TOKENS[validate_channel(_C, channel)]


def firefox_product(channel: str) -> str:
    """Return the product token published for a Firefox channel."""
    validate_channel(_F, channel)
    return FIREFOX_DEV_PRODUCT if channel == "dev" else FIREFOX_PRODUCT


def firefox_categories(channel: str) -> Tuple[str, ...]:
    """Return the product-details categories that belong to a Firefox channel."""
    return FIREFOX_CHANNEL_CATEGORIES[validate_channel(_F, channel)]
