"""
Errors raised by adapters and the scanner.
"""


class ListingError(Exception):
    """A device-listing capability failed. Not retried; stops the scanner."""


class ConfigurationError(ValueError):
    """Invalid construction parameters or configuration values."""
