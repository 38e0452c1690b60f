"""
Tests for host platform detection.
"""

import pytest

from browserfetch import platform_detect
from browserfetch.download.interfaces import PlatformId
from browserfetch.platform_detect import PLATFORMS, HostInfo, detect_platform

pytestmark = [pytest.mark.unit, pytest.mark.core]


class TestDetectPlatform:
    """Decision rules for detect_platform."""

    @pytest.mark.parametrize(
        "os_name, cpu_arch, expected",
        [
            ("Windows", "AMD64", PlatformId.WINDOWS),
            ("Windows", "ARM64", PlatformId.WINDOWS),
            ("Linux", "x86_64", PlatformId.LINUX),
            ("Ubuntu Linux", "aarch64", PlatformId.LINUX),
            ("Mac OS", "Intel x86_64", PlatformId.MAC),
            ("Mac OS", "arm64", PlatformId.MAC_ARM),
            ("macOS", "", PlatformId.MAC_ARM),
        ],
    )
    def test_known_hosts(self, os_name, cpu_arch, expected):
        """Recognized OS names map onto their platform."""
        assert detect_platform(HostInfo(os_name, cpu_arch)) is expected

    def test_linux_is_not_reported_as_mac(self):
        """Linux hosts resolve to linux regardless of CPU."""
        assert detect_platform(HostInfo("Linux", "Intel x86_64")) is PlatformId.LINUX

    def test_windows_takes_priority(self):
        """An OS string matching several rules resolves by rule order."""
        assert detect_platform(HostInfo("Windows Subsystem for Linux", "x86_64")) is (
            PlatformId.WINDOWS
        )

    @pytest.mark.parametrize(
        "os_name, cpu_arch",
        [("FreeBSD", "amd64"), ("", ""), ("SunOS", "sparc"), (None, None)],
    )
    def test_unrecognized_hosts_fall_back(self, os_name, cpu_arch):
        """Unknown hosts get the first selectable platform instead of an error."""
        result = detect_platform(HostInfo(os_name, cpu_arch))

        assert result is PLATFORMS[0][1]
        assert result in {value for _label, value in PLATFORMS}

    def test_introspection_failure_falls_back(self, mocker):
        """Errors from host introspection never reach the caller."""
        mocker.patch.object(
            platform_detect, "get_host_info", side_effect=OSError("uname failed")
        )

        assert detect_platform() is PlatformId.WINDOWS

    def test_never_returns_android(self):
        """The reserved android identifier is never detected."""
        assert detect_platform(HostInfo("Android", "aarch64")) is not PlatformId.ANDROID


class TestGetHostInfo:
    """Host introspection through the platform module."""

    def test_darwin_intel(self, mocker):
        """Darwin on x86_64 is described as an Intel Mac."""
        mocker.patch("platform.system", return_value="Darwin")
        mocker.patch("platform.machine", return_value="x86_64")

        host = platform_detect.get_host_info()

        assert host == HostInfo("Mac OS", "Intel x86_64")
        assert detect_platform(host) is PlatformId.MAC

    def test_darwin_apple_silicon(self, mocker):
        """Darwin on arm64 is an Apple Silicon Mac."""
        mocker.patch("platform.system", return_value="Darwin")
        mocker.patch("platform.machine", return_value="arm64")

        assert detect_platform() is PlatformId.MAC_ARM

    def test_linux_passthrough(self, mocker):
        """Other systems keep their platform.system() name."""
        mocker.patch("platform.system", return_value="Linux")
        mocker.patch("platform.machine", return_value="aarch64")

        assert platform_detect.get_host_info() == HostInfo("Linux", "aarch64")
        assert detect_platform() is PlatformId.LINUX


def test_platform_table_order():
    """The selectable table lists Windows, both Macs, then Linux."""
    assert [value for _label, value in PLATFORMS] == [
        PlatformId.WINDOWS,
        PlatformId.MAC,
        PlatformId.MAC_ARM,
        PlatformId.LINUX,
    ]
