"""Locate downloadable Chromium and Firefox builds for a platform and release channel."""

__version__ = "0.1.0"
