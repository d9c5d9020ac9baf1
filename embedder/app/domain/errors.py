"""Domain errors.

Only configuration errors are meant to reach callers of the service; everything that
originates from the remote world is logged and turned into "no result".
"""
from __future__ import annotations


class OembedError(Exception):
    """Base error for oEmbed processing."""


class OembedConfigurationError(OembedError):
    """Raised for invalid endpoint templates, patterns, strategy names or target types."""


class OembedParseError(OembedError):
    """Raised when a response body is not a valid oEmbed document."""
