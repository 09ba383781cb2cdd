"""
User directory package for the RandomUser API front-end.

This package contains:
- config: .env loading, settings and logging setup
- models: pydantic shapes for user records and the request count
- api_client: HTTP client for RandomUser API
- transformations: display helpers and Pandas flattening
- view: the directory view state and its operations
- rendering: HTML for the card grid, modal, form and toasts
- job: command-line entry point (fetch once and print a summary)
"""

from .errors import DirectoryError, FetchError, ConfigError, FeatureUnavailable

__all__ = ["DirectoryError", "FetchError", "ConfigError", "FeatureUnavailable"]
