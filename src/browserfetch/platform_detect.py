"""
Host platform detection.
"""

import platform
from dataclasses import dataclass
from typing import Optional, Tuple

from browserfetch.download.interfaces import PlatformId
from browserfetch.log_utils import logger

# Selectable platforms in display order; the first entry is the fallback guess.
PLATFORMS: Tuple[Tuple[str, PlatformId], ...] = (
    ("Windows", PlatformId.WINDOWS),
    ("Mac (Intel)", PlatformId.MAC),
    ("Mac (Apple Silicon)", PlatformId.MAC_ARM),
    ("Linux", PlatformId.LINUX),
)

_OS_NAMES = {"darwin": "Mac OS"}
_INTEL_MACHINES = {"x86_64", "amd64", "i386", "i686", "x86"}


@dataclass(frozen=True)
class HostInfo:
    os_name: str
    cpu_arch: str


def get_host_info() -> HostInfo:
    """
    Describe the running host using the platform module.

    Darwin is reported as 'Mac OS' and x86 machines as 'Intel <machine>' so the
    detection rules can match on plain words.
    """
    system = platform.system()
    machine = platform.machine()
    os_name = _OS_NAMES.get(system.lower(), system)
    cpu_arch = f"Intel {machine}" if machine.lower() in _INTEL_MACHINES else machine
    return HostInfo(os_name=os_name, cpu_arch=cpu_arch)


def detect_platform(host: Optional[HostInfo] = None) -> PlatformId:
    """
    Guess the platform identifier for a host.

    Never raises: an unrecognized or uninspectable host yields the first
    entry of PLATFORMS.

    Parameters:
        host (Optional[HostInfo]): Host description; the running host when omitted.
    """
    if host is None:
        try:
            host = get_host_info()
        except (OSError, ValueError) as e:
            logger.debug(f"Host introspection failed: {e}")
            return PLATFORMS[0][1]

    os_name = (host.os_name or "").lower()
    cpu_arch = (host.cpu_arch or "").lower()

    if "windows" in os_name:
        return PlatformId.WINDOWS
    if "linux" in os_name:
        return PlatformId.LINUX
    if "mac" in os_name:
        return PlatformId.MAC if "intel" in cpu_arch else PlatformId.MAC_ARM

    logger.debug(
        f"Unrecognized host OS {host.os_name!r}; defaulting to {PLATFORMS[0][0]}"
    )
    return PLATFORMS[0][1]
