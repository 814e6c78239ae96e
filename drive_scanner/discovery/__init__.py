"""
Discovery module: drive entities, adapters and the scanner engine.
"""

from .adapters import Adapter, BlockDeviceAdapter, list_drives
from .drive import Drive, normalize_descriptor
from .errors import ConfigurationError, ListingError
from .scanner import Scanner, ScannerState

__all__ = [
    "Adapter",
    "BlockDeviceAdapter",
    "ConfigurationError",
    "Drive",
    "ListingError",
    "Scanner",
    "ScannerState",
    "list_drives",
    "normalize_descriptor",
]
