"""
Version Comparison for the browserfetch Download Subsystem

This module provides the vendor-aware comparisons used to order releases
that share a release date.
"""

import re
from typing import List, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version
from packaging.version import parse as parse_version

from browserfetch.exceptions import VersionError


class VersionManager:
    """
    Parses and compares browser version identifiers.

    Firefox versions are compared with PEP 440 semantics after dropping
    the 'esr' suffix; anything still unparseable falls
    back to a natural sort so '10' never sorts below '9'.
    """

    ESR_SUFFIX_RX = re.compile(r"esr$", re.IGNORECASE)

    def normalize_version(self, version: Optional[str]) -> Optional[Version]:
        """
        Normalize a Mozilla version string into a packaging Version.

        Args:
            version: Raw version such as '120.0.1', '121.0b3' or '115.5.0esr'.

        Returns:
            The parsed Version, or None for empty or unparsable inputs.
        """
        if version is None:
            return None

        trimmed = self.ESR_SUFFIX_RX.sub("", version.strip())
        if not trimmed:
            return None

        try:
            return parse_version(trimmed)
        except InvalidVersion:
            return None

    @staticmethod
    def _natural_key(version: str) -> List[Tuple[int, Union[int, str]]]:
        """Produce a natural-sort key by splitting into digit and alphabetic runs."""
        parts = re.findall(r"\d+|[A-Za-z]+", version.lower())
        return [(1, int(p)) if p.isdigit() else (0, p) for p in parts]

    def compare_versions(self, version1: str, version2: str) -> int:
        """
        Compare two version strings using PEP 440 semantics when possible.

        Versions that parse always rank above versions that do not; two
        unparseable versions are compared with a natural sort. This keeps the
        ordering total when a feed mixes both kinds.

        Args:
            version1: First version string to compare
            version2: Second version string to compare

        Returns:
            int: 1 if version1 > version2, 0 if equal, -1 if version1 < version2
        """
        v1 = self.normalize_version(version1)
        v2 = self.normalize_version(version2)
        if v1 is not None and v2 is not None:
            return (v1 > v2) - (v1 < v2)
        if v1 is not None or v2 is not None:
            return 1 if v1 is not None else -1

        k1, k2 = self._natural_key(version1), self._natural_key(version2)
        return (k1 > k2) - (k1 < k2)

    def compare_positions(self, position1: str, position2: str) -> int:
        """
        Compare two Chromium main-branch positions numerically.

        Raises:
            VersionError: If either position is not an integer.
        """
        try:
            p1, p2 = int(position1), int(position2)
        except (TypeError, ValueError) as e:
            raise VersionError(
                "Branch positions must be integers",
                field="value",
                value=f"{position1!r}, {position2!r}",
            ) from e
        return (p1 > p2) - (p1 < p2)
