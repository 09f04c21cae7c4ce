"""Errors raised by dimensions."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A dimension was built or called with an invalid configuration.

    Raised synchronously by the call that detects the problem (construction,
    or ``add_many`` with a batch that is not a sequence). Never retried.
    Exceptions raised by user-supplied reducers, extractors or filters are
    NOT wrapped in this type; they propagate unmodified.
    """
