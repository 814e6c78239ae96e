"""
Configuration loading.
"""

from .loader import ConfigLoader, ScannerConfig

__all__ = ["ConfigLoader", "ScannerConfig"]
