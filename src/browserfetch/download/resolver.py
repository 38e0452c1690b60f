"""
Release Resolution for the browserfetch Download Subsystem

This module turns a (vendor, channel, platform) selection into an ordered list
of normalized Version records by fetching the vendor's release feed through
the fetch cache, filtering it and normalizing each surviving record. It also
rebuilds the artifact URL for a resolved Version.
"""

from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote, urlencode

from browserfetch.constants import (
    CHROMIUM_RELEASES_LIMIT,
    CHROMIUM_RELEASES_URL,
    CHROMIUM_SNAPSHOTS_URL,
    DEFAULT_FETCH_CACHE_TTL_SECONDS,
    FIREFOX_PRODUCT_DETAILS_URL,
    FIREFOX_RELEASES_URL,
)
from browserfetch.exceptions import ParseError
from browserfetch.log_utils import logger

from . import metadata
from .cache import FetchCache
from .interfaces import ChromiumRelease, FirefoxRelease, PlatformId, Vendor, Version
from .version import VersionManager

# =============================================================================
# Payload parsing
# =============================================================================


def _field(record: Dict[str, Any], name: str, kinds: Tuple[type, ...], url: str) -> Any:
    value = record.get(name)
    # bool is an int subclass but never a valid numeric field
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise ParseError(
            f"Release record has missing or invalid '{name}'",
            url=url,
            details=repr(value),
        )
    return value


def _optional_field(record: Dict[str, Any], name: str, kinds: Tuple[type, ...]) -> Any:
    value = record.get(name)
    if isinstance(value, bool) or not isinstance(value, kinds):
        return None
    return value


def parse_chromium_releases(payload: Any, url: str) -> List[ChromiumRelease]:
    """
    Parse the Chromium dash feed (a JSON array of release objects).

    Raises:
        ParseError: If the payload or any record does not have the expected shape.
    """
    if not isinstance(payload, list):
        raise ParseError(
            f"Expected a list of releases, got {type(payload).__name__}", url=url
        )

    releases = []
    for item in payload:
        if not isinstance(item, dict):
            raise ParseError(
                f"Expected a release object, got {type(item).__name__}", url=url
            )
        hashes = item.get("hashes")
        releases.append(
            ChromiumRelease(
                channel=_field(item, "channel", (str,), url),
                platform=_optional_field(item, "platform", (str,)),
                version=_field(item, "version", (str,), url),
                time=_field(item, "time", (int, float), url),
                chromium_main_branch_position=_optional_field(
                    item, "chromium_main_branch_position", (int,)
                ),
                milestone=_optional_field(item, "milestone", (int,)),
                previous_version=_optional_field(item, "previous_version", (str,)),
                hashes=dict(hashes) if isinstance(hashes, dict) else {},
            )
        )
    return releases


def parse_firefox_releases(payload: Any, url: str) -> List[FirefoxRelease]:
    """
    Parse a Mozilla product-details document (`{"releases": {name: record}}`).

    Raises:
        ParseError: If the payload or any record does not have the expected shape.
    """
    records = payload.get("releases") if isinstance(payload, dict) else None
    if not isinstance(records, dict):
        raise ParseError("Expected an object with a 'releases' mapping", url=url)

    releases = []
    for name, item in records.items():
        if not isinstance(item, dict):
            raise ParseError(
                f"Expected a release object for {name!r}, got {type(item).__name__}",
                url=url,
            )
        releases.append(
            FirefoxRelease(
                category=_field(item, "category", (str,), url),
                product=_field(item, "product", (str,), url),
                version=_field(item, "version", (str,), url),
                date=_field(item, "date", (str,), url),
                build_number=_optional_field(item, "build_number", (int,)),
                description=_optional_field(item, "description", (str,)),
                is_security_driven=item.get("is_security_driven") is True,
            )
        )
    return releases


# =============================================================================
# Normalization
# =============================================================================


def normalize_chromium(record: ChromiumRelease) -> Version:
    """
    Convert a Chromium record into a Version keyed by its main-branch position.

    Raises:
        ParseError: If the record has no branch position or an unusable time.
    """
    position = record.chromium_main_branch_position
    if position is None:
        raise ParseError(f"Chromium {record.version} has no main-branch position")
    try:
        date = datetime.fromtimestamp(record.time / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ParseError(
            f"Chromium {record.version} has an invalid time", details=str(e)
        ) from e
    return Version(
        label=f"{record.version} (r{position})",
        value=str(position),
        date=date,
        full_version=record.version,
    )


def normalize_firefox(record: FirefoxRelease) -> Version:
    """
    Convert a Firefox record into a Version keyed by its version string.

    Raises:
        ParseError: If the record's date is not 'YYYY-MM-DD'.
    """
    try:
        date = datetime.strptime(record.date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ParseError(
            f"Firefox {record.version} has an invalid date", details=str(e)
        ) from e
    label = record.version
    if record.build_number is not None:
        label = f"{record.version} (build {record.build_number})"
    return Version(
        label=label,
        value=record.version,
        date=date,
        full_version=record.version,
    )


_NORMALIZERS: Dict[Vendor, Callable[[Any], Version]] = {
    Vendor.CHROMIUM: normalize_chromium,
    Vendor.FIREFOX: normalize_firefox,
}


# =============================================================================
# Resolver
# =============================================================================


class ReleaseResolver:
    """
    Resolves release lists and artifact URLs for Chromium and Firefox.

    Example:
        async with AsyncFeedClient() as client:
            resolver = ReleaseResolver(FetchCache(client.get_json))
            versions = await resolver.resolve_releases("chromium", "stable", "linux")
    """

    def __init__(
        self,
        cache: FetchCache,
        ttl_seconds: float = DEFAULT_FETCH_CACHE_TTL_SECONDS,
        version_manager: Optional[VersionManager] = None,
    ) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.version_manager = version_manager or VersionManager()

    def feed_url(self, vendor: Vendor, channel: str, platform: PlatformId) -> str:
        """
        Build the upstream feed URL for a selection.

        Raises:
            UnsupportedChannelError: If the vendor has no such channel.
            UnsupportedPlatformError: If the vendor has no feed name for the platform.
        """
        vendor = Vendor(vendor)
        api_name = metadata.api_platform_name(vendor, platform)
        if vendor is Vendor.CHROMIUM:
            query = urlencode(
                {
                    "channel": metadata.chromium_channel_token(channel),
                    "platform": api_name,
                    "num": CHROMIUM_RELEASES_LIMIT,
                }
            )
            return f"{CHROMIUM_RELEASES_URL}?{query}"
        # product-details is not platform-scoped
        return FIREFOX_PRODUCT_DETAILS_URL.format(
            product=metadata.firefox_product(channel)
        )

    def _select(
        self, vendor: Vendor, channel: str, platform: PlatformId, payload: Any, url: str
    ) -> List[Any]:
        if vendor is Vendor.CHROMIUM:
            channel_token = metadata.chromium_channel_token(channel)
            api_name = metadata.api_platform_name(vendor, platform)
            selected = []
            for record in parse_chromium_releases(payload, url):
                if record.channel != channel_token:
                    continue
                if record.platform is not None and record.platform != api_name:
                    continue
                if record.chromium_main_branch_position is None:
                    logger.warning(
                        f"Skipping Chromium {record.version}: no main-branch position"
                    )
                    continue
                selected.append(record)
            return selected

        categories = metadata.firefox_categories(channel)
        product = metadata.firefox_product(channel)
        return [
            record
            for record in parse_firefox_releases(payload, url)
            if record.category in categories and record.product == product
        ]

    def _compare(self, vendor: Vendor) -> Callable[[Version, Version], int]:
        compare_values = (
            self.version_manager.compare_positions
            if vendor is Vendor.CHROMIUM
            else self.version_manager.compare_versions
        )

        def _newest_first(a: Version, b: Version) -> int:
            if a.date != b.date:
                return -1 if a.date > b.date else 1
            return -compare_values(a.value, b.value)

        return _newest_first

    async def resolve_releases(
        self, vendor: Vendor, channel: str, platform: PlatformId
    ) -> List[Version]:
        """
        Resolve the releases a vendor publishes for a channel and platform.

        Parameters:
            vendor (Vendor): 'chromium' or 'firefox'.
            channel (str): A channel from the vendor's channel set.
            platform (PlatformId): Target platform.

        Returns:
            List[Version]: Releases newest first; empty when nothing matches.

        Raises:
            UnsupportedChannelError: If the vendor has no such channel.
            UnsupportedPlatformError: If the vendor has no feed name for the platform.
            FetchError: If the feed could not be retrieved.
            ParseError: If the feed does not have the expected shape.
        """
        vendor = Vendor(vendor)
        url = self.feed_url(vendor, channel, platform)
        payload = await self.cache.fetch_with_cache(url, self.ttl_seconds)

        records = self._select(vendor, channel, platform, payload, url)
        normalize = _NORMALIZERS[vendor]
        versions = [normalize(record) for record in records]
        versions.sort(key=cmp_to_key(self._compare(vendor)))

        logger.debug(
            f"Resolved {len(versions)} {vendor.value} {channel} releases for {PlatformId(platform).value}"
        )
        return versions

    async def latest_release(
        self, vendor: Vendor, channel: str, platform: PlatformId
    ) -> Optional[Version]:
        """Return the newest release for the selection, or None if there is none."""
        versions = await self.resolve_releases(vendor, channel, platform)
        return versions[0] if versions else None

    def artifact_url(
        self, vendor: Vendor, channel: str, platform: PlatformId, version: Version
    ) -> str:
        """
        Build the download URL of a resolved Version's archive for `platform`.

        Raises:
            UnsupportedChannelError: If the vendor has no such channel.
            UnsupportedPlatformError: If the vendor ships no archive for the platform.
        """
        vendor = Vendor(vendor)
        dir_name = metadata.artifact_dir_name(vendor, platform)
        file_name = metadata.artifact_file_name(vendor, platform)

        if vendor is Vendor.CHROMIUM:
            metadata.validate_channel(vendor, channel)
            return CHROMIUM_SNAPSHOTS_URL.format(
                dir_name=dir_name, position=version.value, file_name=file_name
            )
        return FIREFOX_RELEASES_URL.format(
            product=metadata.firefox_product(channel),
            version=version.full_version,
            dir_name=dir_name,
            file_name=quote(file_name.format(version=version.full_version)),
        )
