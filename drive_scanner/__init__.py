"""
Drive scanner: live, de-duplicated view of the block devices attached to a host.
"""

from .discovery import (
    Adapter,
    BlockDeviceAdapter,
    ConfigurationError,
    Drive,
    ListingError,
    Scanner,
    ScannerState,
)

__version__ = "0.1.0"

__all__ = [
    "Adapter",
    "BlockDeviceAdapter",
    "ConfigurationError",
    "Drive",
    "ListingError",
    "Scanner",
    "ScannerState",
]
