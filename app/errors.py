"""Workforce dashboard exception hierarchy.

The normalizer and exporter never raise for well-typed input; these errors
belong to the boundaries around them (roster loading and configuration).
"""

from __future__ import annotations


class WorkforceError(Exception):
    """Base exception for all workforce dashboard failures."""


class WorkforceConfigError(WorkforceError):
    """Raised for invalid runtime configuration."""


class RosterLoadError(WorkforceError):
    """Raised when a roster file cannot be read, decoded or validated."""
