"""
Exception types raised by the feed digest reader.
"""


class FdrError(Exception):
    """Base class for all feed digest reader errors."""


class ValidationError(FdrError):
    """A single feed entry lacks a required field or has an unusable value."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class FetchError(FdrError):
    """A whole feed could not be fetched or parsed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class StoreIOError(FdrError):
    """The seen-state file exists but could not be read."""


class StoreWriteError(FdrError):
    """The seen-state file could not be written at the end of a run."""


class SubscriptionError(FdrError):
    """The subscription (OPML) file is missing or malformed."""


class ConfigError(FdrError):
    """The settings file is invalid."""
