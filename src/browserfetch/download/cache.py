"""
Fetch Cache for the browserfetch Download Subsystem

This module memoizes remote JSON fetches for a time-to-live so repeated
lookups do not re-hit the upstream feeds. Entries are kept in a key/value
store under `fetch:<url>` with the expiry instant under
`fetch:<url>:expiresAt` (epoch milliseconds).
"""

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union

import platformdirs

from browserfetch.constants import (
    APP_NAME,
    DEFAULT_FETCH_CACHE_TTL_SECONDS,
    FETCH_CACHE_EXPIRES_SUFFIX,
    FETCH_CACHE_FILE,
    FETCH_CACHE_KEY_PREFIX,
)
from browserfetch.log_utils import logger

from .interfaces import CacheEntry

Pathish = Union[str, Path]
FetchJson = Callable[[str], Awaitable[Any]]

STORED_AT_SUFFIX = ":storedAt"


class KeyValueStore(Protocol):
    """
    String key/value storage with the shape of browser local storage.

    `set_item` and `remove_item` return False when the change could not be
    persisted.
    """

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> bool: ...

    def remove_item(self, key: str) -> bool: ...

    def keys(self) -> List[str]: ...

    def clear(self) -> None: ...


class MemoryStore:
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> bool:
        self._items[key] = value
        return True

    def remove_item(self, key: str) -> bool:
        self._items.pop(key, None)
        return True

    def keys(self) -> List[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


def _atomic_write_json(file_path: Pathish, data: Dict[str, str]) -> bool:
    """
    Write the given mapping to `file_path` as JSON via a temporary file and an atomic replace.

    Returns:
        bool: `True` if the file was written and moved into place, `False` on error.
    """
    try:
        temp_fd, temp_path = tempfile.mkstemp(
            dir=os.path.dirname(file_path), prefix="tmp-", suffix=".json"
        )
    except OSError as e:
        logger.error(f"Could not create temporary file for {file_path}: {e}")
        return False

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_f:
            json.dump(data, temp_f, indent=2)
        os.replace(temp_path, file_path)
    except (OSError, UnicodeEncodeError) as e:
        logger.error(f"Could not write to {file_path}: {e}")
        return False
    finally:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.debug(f"Could not remove temporary file {temp_path}: {e}")
    return True


class JsonFileStore:
    """
    Store persisted as a single JSON object on disk.

    The file is read on every access and rewritten atomically on every change,
    so separate processes sharing it see each other's last completed write.
    Write failures are logged and leave the previous file in place.
    """

    def __init__(self, cache_dir: Optional[Pathish] = None) -> None:
        """
        Parameters:
            cache_dir (Optional[Pathish]): Directory holding the cache file. Defaults to the platformdirs user cache directory.
        """
        self.cache_dir = Path(cache_dir or platformdirs.user_cache_dir(APP_NAME))
        self.cache_file = self.cache_dir / FETCH_CACHE_FILE

    def _read(self) -> Dict[str, str]:
        if not self.cache_file.exists():
            return {}
        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.cache_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed cache file {self.cache_file}")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> bool:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create cache directory {self.cache_dir}: {e}")
            return False
        return _atomic_write_json(self.cache_file, data)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> bool:
        data = self._read()
        data[key] = value
        return self._write(data)

    def remove_item(self, key: str) -> bool:
        data = self._read()
        if data.pop(key, None) is None:
            return True
        return self._write(data)

    def keys(self) -> List[str]:
        return list(self._read())

    def clear(self) -> None:
        if self.cache_file.exists():
            self.cache_file.unlink()


def _parse_millis(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


class FetchCache:
    """
    TTL-memoizing wrapper around a JSON fetch.

    Caching is a development convenience: with `caching_enabled` False every
    call is a live fetch and the store is never touched. Concurrent misses for
    the same URL are not collapsed; each performs its own fetch and write.
    """

    def __init__(
        self,
        fetch_json: FetchJson,
        store: Optional[KeyValueStore] = None,
        caching_enabled: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Parameters:
            fetch_json (FetchJson): Coroutine function performing the live fetch.
            store (Optional[KeyValueStore]): Entry storage; defaults to a MemoryStore.
            caching_enabled (bool): Whether entries are read and written at all.
            clock (Callable[[], float]): Current time in epoch seconds.
        """
        self.fetch_json = fetch_json
        self.store: KeyValueStore = store if store is not None else MemoryStore()
        self.caching_enabled = caching_enabled
        self._clock = clock

    @staticmethod
    def cache_key(url: str) -> str:
        return f"{FETCH_CACHE_KEY_PREFIX}{url}"

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def read_entry(self, url: str) -> Optional[CacheEntry]:
        """
        Return the stored entry for `url`, or None when absent or incomplete.

        An entry lacking a parseable expiry is treated as absent; it is never
        served as valid forever.
        """
        key = self.cache_key(url)
        payload_text = self.store.get_item(key)
        expires_at = _parse_millis(
            self.store.get_item(f"{key}{FETCH_CACHE_EXPIRES_SUFFIX}")
        )
        if payload_text is None or expires_at is None:
            return None

        stored_at = _parse_millis(self.store.get_item(f"{key}{STORED_AT_SUFFIX}"))
        if stored_at is None or stored_at > expires_at:
            stored_at = expires_at
        try:
            payload = json.loads(payload_text)
        except json.JSONDecodeError:
            logger.debug(f"Discarding undecodable cache entry for {url}")
            return None

        return CacheEntry(
            key=key,
            payload=payload,
            stored_at=stored_at,
            ttl_seconds=(expires_at - stored_at) / 1000,
        )

    def write_entry(self, url: str, payload: Any, ttl_seconds: float) -> CacheEntry:
        """
        Store `payload` for `url`, overwriting any previous entry.

        A store that fails to persist the entry is logged; the fetched payload
        is still returned to the caller by `fetch_with_cache`.
        """
        entry = CacheEntry(
            key=self.cache_key(url),
            payload=payload,
            stored_at=self._now_ms(),
            ttl_seconds=ttl_seconds,
        )
        # The expiry is written last so it never outlives the payload it covers
        items = (
            (entry.key, json.dumps(payload)),
            (f"{entry.key}{STORED_AT_SUFFIX}", str(entry.stored_at)),
            (f"{entry.key}{FETCH_CACHE_EXPIRES_SUFFIX}", str(entry.expires_at)),
        )
        try:
            persisted = all([self.store.set_item(key, value) for key, value in items])
        except OSError as e:
            logger.warning(f"Could not cache response for {url}: {e}")
            return entry
        if not persisted:
            logger.warning(f"Could not cache response for {url}")
        return entry

    def invalidate(self, url: str) -> None:
        key = self.cache_key(url)
        for suffix in ("", STORED_AT_SUFFIX, FETCH_CACHE_EXPIRES_SUFFIX):
            self.store.remove_item(f"{key}{suffix}")

    def clear(self) -> None:
        """Remove every fetch entry from the store."""
        for key in self.store.keys():
            if key.startswith(FETCH_CACHE_KEY_PREFIX):
                self.store.remove_item(key)

    async def fetch_with_cache(
        self, url: str, ttl_seconds: float = DEFAULT_FETCH_CACHE_TTL_SECONDS
    ) -> Any:
        """
        Return the JSON document at `url`, served from the store while its entry is valid.

        Parameters:
            url (str): Feed URL.
            ttl_seconds (float): Lifetime of an entry written by this call.

        Returns:
            Any: The decoded JSON document.

        Raises:
            FetchError: Propagated unchanged from the live fetch.
            ParseError: Propagated unchanged from the live fetch.
        """
        if not self.caching_enabled:
            return await self.fetch_json(url)

        entry = self.read_entry(url)
        if entry is not None and entry.is_valid(self._now_ms()):
            logger.debug(f"Cache hit for {url}")
            return entry.payload

        logger.debug(
            f"Cache {'expired' if entry is not None else 'miss'} for {url}; fetching"
        )
        result = await self.fetch_json(url)
        self.write_entry(url, result, ttl_seconds)
        return result
