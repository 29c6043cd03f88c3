"""Gambit exception hierarchy.

This module defines one error type per failure boundary: header parsing,
record building, transfer, decoding, storage, and configuration.
"""

from __future__ import annotations


class GambitError(Exception):
    """Base exception for all Gambit failures."""


class GambitConfigError(GambitError):
    """Raised for invalid runtime configuration."""


class GambitPlanError(GambitConfigError):
    """Raised for invalid or unsupported fleet plan files."""


class GambitParseError(GambitError):
    """Raised when a header token or game block cannot be parsed."""


class GambitRecordError(GambitParseError):
    """Raised when a game record cannot be built from its headers."""


class GambitFetchError(GambitError):
    """Raised when a remote archive transfer does not succeed."""


class GambitCodecError(GambitError):
    """Raised when a compressed archive cannot be decoded."""


class GambitStoreError(GambitError):
    """Raised for chunk and manifest persistence failures."""
