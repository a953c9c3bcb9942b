"""
Custom Exception Classes for the Paranormal Story Reader

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import List, Optional, Tuple


class StoryReaderError(Exception):
    """Base exception for all Story Reader application errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(StoryReaderError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Fetch Errors
# =============================================================================

class FetchError(StoryReaderError):
    """Base exception for errors while fetching content from the upstream API."""
    pass


class TransportError(FetchError):
    """Raised when the connection to the upstream API or a relay fails."""
    pass


class HttpStatusError(FetchError):
    """Raised when the upstream API or a relay answers with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedResponse(FetchError):
    """Raised when a payload does not have the expected listing shape."""
    pass


class AllStrategiesExhausted(FetchError):
    """Raised when direct access and every relay have failed for a request."""

    def __init__(self, message: str, last_error: Optional[Exception] = None):
        self.last_error = last_error
        super().__init__(message)


class AllSourcesExhausted(FetchError):
    """Reported when every content source in the fallback cascade failed.

    The cascade logs it with the recorded failures and falls back to sample stories.
    """

    def __init__(self, message: str, failures: Optional[List[Tuple[str, Exception]]] = None):
        self.failures = failures or []
        super().__init__(message)
