"""
Adapters translating device listers into Drive entities.
"""

from .base import Adapter
from .block_device import BlockDeviceAdapter, list_drives

__all__ = ["Adapter", "BlockDeviceAdapter", "list_drives"]
