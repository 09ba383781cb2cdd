#!/usr/bin/env python3
"""
Exceptions shared across the user directory package.
"""

from typing import Optional


class DirectoryError(Exception):
    """Base class for every error raised by this package."""


class FetchError(DirectoryError):
    """
    The one failure kind of a user fetch.

    Covers network failure, non-success HTTP status, a body that is not JSON
    and a body that does not have the expected shape. Callers never branch on
    which of those happened; ``cause`` keeps the original exception for logs.
    """

    def __init__(self, message: str, count: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.count = count
        self.cause = cause


class ConfigError(DirectoryError):
    """Raised at startup when an environment setting cannot be used."""


class FeatureUnavailable(DirectoryError):
    """Raised when an operation is called on a page variant that lacks it."""
