"""
Tests for the vendor metadata tables.

Covers:
- Feed platform names, archive directories and archive filenames per vendor
- Totality over the selectable platforms
- UnsupportedPlatformError for unmapped pairs (android under Chromium)
- Channel validation and channel token lookups
"""

import pytest

from browserfetch.download import metadata
from browserfetch.download.interfaces import PlatformId, Vendor
from browserfetch.exceptions import (
    UnsupportedChannelError,
    UnsupportedPlatformError,
    ValidationError,
)
from browserfetch.platform_detect import PLATFORMS

pytestmark = [pytest.mark.unit, pytest.mark.core]

LOOKUPS = (
    metadata.api_platform_name,
    metadata.artifact_dir_name,
    metadata.artifact_file_name,
)
SELECTABLE = [value for _label, value in PLATFORMS]


class TestChromiumTables:
    """Chromium naming conventions."""

    @pytest.mark.parametrize(
        "platform, api_name, dir_name, file_name",
        [
            (PlatformId.WINDOWS, "Windows", "Win_x64", "chrome-win.zip"),
            (PlatformId.MAC, "Mac", "Mac", "chrome-mac.zip"),
            (PlatformId.MAC_ARM, "Mac", "Mac_Arm", "chrome-mac.zip"),
            (PlatformId.LINUX, "Linux", "Linux_x64", "chrome-linux.zip"),
        ],
    )
    def test_lookups(self, platform, api_name, dir_name, file_name):
        """Each Chromium platform maps to its feed name, directory and archive."""
        vendor = Vendor.CHROMIUM
        assert metadata.api_platform_name(vendor, platform) == api_name
        assert metadata.artifact_dir_name(vendor, platform) == dir_name
        assert metadata.artifact_file_name(vendor, platform) == file_name

    @pytest.mark.parametrize("lookup", LOOKUPS)
    def test_android_is_unsupported(self, lookup):
        """Android has no Chromium mapping in any table."""
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            lookup(Vendor.CHROMIUM, PlatformId.ANDROID)

        assert exc_info.value.vendor == "chromium"
        assert exc_info.value.platform == "android"
        assert str(exc_info.value) == "chromium is not available for platform 'android'"

    def test_accepts_plain_strings(self):
        """Lookups accept the raw identifier strings as well as enum members."""
        assert metadata.artifact_dir_name("chromium", "mac-arm") == "Mac_Arm"


class TestFirefoxTables:
    """Firefox naming conventions."""

    def test_directories(self):
        """Firefox archive directories follow the ftp.mozilla.org layout."""
        vendor = Vendor.FIREFOX
        assert metadata.artifact_dir_name(vendor, PlatformId.WINDOWS) == "win64"
        assert metadata.artifact_dir_name(vendor, PlatformId.MAC) == "mac"
        assert metadata.artifact_dir_name(vendor, PlatformId.MAC_ARM) == "mac"
        assert metadata.artifact_dir_name(vendor, PlatformId.LINUX) == "linux-x86_64"
        assert metadata.artifact_dir_name(vendor, PlatformId.ANDROID) == "android-x86_64"

    def test_file_names_are_version_templates(self):
        """Firefox archive names embed the version."""
        template = metadata.artifact_file_name(Vendor.FIREFOX, PlatformId.LINUX)
        assert template.format(version="120.0") == "firefox-120.0.tar.bz2"

    def test_android_has_no_installer(self):
        """Android is mapped for directories but has no installer filename."""
        with pytest.raises(UnsupportedPlatformError):
            metadata.artifact_file_name(Vendor.FIREFOX, PlatformId.ANDROID)


class TestTotality:
    """Lookups are total over the selectable platforms."""

    @pytest.mark.parametrize("vendor", list(Vendor))
    @pytest.mark.parametrize("platform", SELECTABLE)
    @pytest.mark.parametrize("lookup", LOOKUPS)
    def test_every_selectable_platform_is_mapped(self, lookup, platform, vendor):
        """Every vendor maps every selectable platform to a non-empty name."""
        assert lookup(vendor, platform)

    def test_unknown_platform_string(self):
        """Identifiers outside PlatformId raise rather than returning None."""
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            metadata.api_platform_name(Vendor.FIREFOX, "solaris")

        assert exc_info.value.platform == "solaris"
        assert isinstance(exc_info.value, ValidationError)

    def test_tables_are_immutable(self):
        """The lookup tables cannot be modified at runtime."""
        with pytest.raises(TypeError):
            metadata.ARTIFACT_DIR_NAMES[(Vendor.CHROMIUM, PlatformId.ANDROID)] = "x"


class TestChannels:
    """Channel sets and channel tokens."""

    def test_channel_sets_are_per_vendor(self):
        """Chromium and Firefox publish different channel sets."""
        assert metadata.supported_channels(Vendor.CHROMIUM) == (
            "stable",
            "beta",
            "dev",
            "canary",
        )
        assert metadata.supported_channels(Vendor.FIREFOX) == ("stable", "dev", "esr")

    @pytest.mark.parametrize(
        "vendor, channel",
        [(Vendor.FIREFOX, "beta"), (Vendor.FIREFOX, "canary"), (Vendor.CHROMIUM, "esr")],
    )
    def test_foreign_channels_are_rejected(self, vendor, channel):
        """A channel from the other vendor is not accepted."""
        with pytest.raises(UnsupportedChannelError) as exc_info:
            metadata.validate_channel(vendor, channel)

        assert exc_info.value.channel == channel
        assert exc_info.value.field == "channel"

    def test_chromium_channel_token(self):
        """The Chromium feed spells channels capitalized."""
        assert metadata.chromium_channel_token("stable") == "Stable"
        assert metadata.chromium_channel_token("canary") == "Canary"

    def test_firefox_product(self):
        """Only the dev channel is published as Developer Edition."""
        assert metadata.firefox_product("dev") == "devedition"
        assert metadata.firefox_product("stable") == "firefox"
        assert metadata.firefox_product("esr") == "firefox"

    def test_firefox_categories(self):
        """Stable covers both major and point releases."""
        assert metadata.firefox_categories("stable") == ("major", "stability")
        assert metadata.firefox_categories("esr") == ("esr",)
        with pytest.raises(UnsupportedChannelError):
            metadata.firefox_categories("nightly")
