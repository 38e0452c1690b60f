# src/browserfetch/cli.py

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from browserfetch import __version__, config, log_utils
from browserfetch.download import (
    AsyncFeedClient,
    FetchCache,
    JsonFileStore,
    PlatformId,
    ReleaseResolver,
    Vendor,
    Version,
)
from browserfetch.download.metadata import CHANNELS
from browserfetch.exceptions import (
    ConfigurationError,
    FetchError,
    ParseError,
    UnsupportedChannelError,
    UnsupportedPlatformError,
)
from browserfetch.platform_detect import PLATFORMS, detect_platform


def _load_settings() -> Optional[config.Settings]:
    """
    Load settings and apply the configured log level.

    Returns:
        Settings | None: The settings, or None if the configuration is invalid.
    """
    try:
        settings = config.load_settings()
    except ConfigurationError as error:
        log_utils.logger.error(f"Failed to load configuration: {error}")
        return None

    if settings.log_level:
        log_utils.set_log_level(settings.log_level)
    if settings.log_dir:
        log_utils.add_file_logging(
            Path(settings.log_dir), settings.log_level or "INFO"
        )
    return settings


async def _resolve(
    settings: config.Settings,
    vendor: Vendor,
    channel: str,
    platform: PlatformId,
    with_urls: bool,
) -> List[tuple]:
    """
    Resolve releases and, when requested, their artifact URLs.

    Returns:
        list[tuple[Version, str | None]]: Resolved versions paired with URLs.
    """
    # Production runs never touch the persisted store
    store = JsonFileStore(settings.cache_dir) if settings.caching_enabled else None
    async with AsyncFeedClient(timeout=settings.request_timeout) as client:
        cache = FetchCache(
            client.get_json,
            store=store,
            caching_enabled=settings.caching_enabled,
        )
        resolver = ReleaseResolver(cache, ttl_seconds=settings.cache_ttl_seconds)
        versions = await resolver.resolve_releases(vendor, channel, platform)

    if not with_urls:
        return [(version, None) for version in versions]
    return [
        (version, resolver.artifact_url(vendor, channel, platform, version))
        for version in versions
    ]


def _format_version(version: Version, url: Optional[str]) -> str:
    line = f"{version.date:%Y-%m-%d}  {version.label}"
    return f"{line}\n    {url}" if url else line


def _handle_releases(args: argparse.Namespace, settings: config.Settings) -> int:
    vendor = Vendor(args.browser)
    platform = PlatformId(args.platform) if args.platform else detect_platform()
    if not args.platform:
        log_utils.logger.info(f"Detected platform: {platform.value}")

    try:
        results = asyncio.run(
            _resolve(settings, vendor, args.channel, platform, args.urls)
        )
    except (UnsupportedPlatformError, UnsupportedChannelError) as error:
        log_utils.logger.error(
            f"Not available for this platform/channel combination: {error}"
        )
        return 1
    except (FetchError, ParseError) as error:
        log_utils.logger.error(f"Could not load release data: {error}")
        return 1

    if not results:
        log_utils.logger.info(
            f"No {vendor.value} {args.channel} releases found for {platform.value}."
        )
        return 0

    if args.limit is not None:
        results = results[: args.limit]
    for version, url in results:
        print(_format_version(version, url))
    return 0


def _handle_cache(args: argparse.Namespace, settings: config.Settings) -> int:
    store = JsonFileStore(settings.cache_dir)
    if args.cache_command == "clear":
        try:
            store.clear()
        except OSError as error:
            log_utils.logger.error(f"Could not clear fetch cache: {error}")
            return 1
        log_utils.logger.info(f"Cleared fetch cache at {store.cache_file}")
        return 0
    log_utils.logger.info(f"Fetch cache file: {store.cache_file}")
    log_utils.logger.info(f"Caching enabled: {settings.caching_enabled}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="browserfetch",
        description="browserfetch - locate Chromium and Firefox builds for your platform",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("platform", help="Display the detected platform")

    releases_parser = subparsers.add_parser(
        "releases", help="List releases for a browser channel and platform"
    )
    releases_parser.add_argument(
        "--browser",
        "-b",
        required=True,
        choices=[vendor.value for vendor in Vendor],
        help="Browser vendor",
    )
    releases_parser.add_argument(
        "--channel",
        "-c",
        default="stable",
        choices=sorted({c for channels in CHANNELS.values() for c in channels}),
        help="Release channel (default: stable)",
    )
    releases_parser.add_argument(
        "--platform",
        "-p",
        choices=[value.value for _label, value in PLATFORMS],
        help="Target platform (default: detected)",
    )
    releases_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        help="Show at most this many releases",
    )
    releases_parser.add_argument(
        "--urls",
        action="store_true",
        help="Also print the artifact download URL of each release",
    )

    cache_parser = subparsers.add_parser("cache", help="Inspect or clear the fetch cache")
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command")
    cache_subparsers.add_parser("clear", help="Remove all cached feed responses")
    cache_subparsers.add_parser("info", help="Show the cache location and status")

    subparsers.add_parser("version", help="Display browserfetch version")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Entry point for the browserfetch command-line interface.

    Parses command-line arguments and dispatches subcommands: platform,
    releases, cache and version. Exits with status 1 when a command fails.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "platform":
        platform = detect_platform()
        label = next(label for label, value in PLATFORMS if value is platform)
        print(f"{platform.value} ({label})")
    elif args.command == "version":
        print(f"browserfetch v{__version__}")
    elif args.command in ("releases", "cache"):
        if args.command == "releases" and args.limit is not None and args.limit < 0:
            parser.error("--limit must be >= 0")
        settings = _load_settings()
        if settings is None:
            sys.exit(1)
        handler = _handle_releases if args.command == "releases" else _handle_cache
        exit_code = handler(args, settings)
        if exit_code:
            sys.exit(exit_code)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
