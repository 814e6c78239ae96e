#!/usr/bin/env python3
"""
Block device adapter.
Lists disks with lsblk and turns them into Drive entities.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ...core.shell_executor import run_command, check_command_available
from ..drive import Drive, parse_flag
from ..errors import ConfigurationError, ListingError
from .base import Adapter

logger = logging.getLogger(__name__)

LSBLK_COLUMNS = "NAME,PATH,SIZE,MODEL,VENDOR,MOUNTPOINT,RM,HOTPLUG,TYPE"

# A disk holding one of these is the boot/system drive
SYSTEM_MOUNTPOINTS = {"/", "/boot", "/boot/efi", "[SWAP]"}

Lister = Callable[[bool], Sequence[Dict[str, Any]]]


def list_drives(include_system: bool = False) -> List[Dict[str, Any]]:
    """
    List block devices with lsblk.

    Args:
        include_system: Keep drives holding system mountpoints

    Returns:
        Raw descriptors ("device", "displayName", "description", "size",
        "mountpoints", "isSystem", "isRemovable"), one per disk

    Raises:
        ListingError: If lsblk is missing, fails or prints garbage
    """
    if not check_command_available("lsblk"):
        raise ListingError("lsblk not found")

    success, stdout, stderr = run_command(["lsblk", "-J", "-b", "-o", LSBLK_COLUMNS])
    if not success:
        raise ListingError(stderr or "lsblk failed")

    try:
        data = json.loads(stdout or "{}")
    except json.JSONDecodeError as e:
        raise ListingError(f"Failed to parse lsblk output: {e}") from e

    descriptors = []
    for device in data.get("blockdevices", []):
        if device.get("type") != "disk":
            continue

        descriptor = _descriptor_from_lsblk(device)
        if descriptor["isSystem"] and not include_system:
            logger.debug(f"Skipping system drive {descriptor['device']}")
            continue
        descriptors.append(descriptor)

    return descriptors


def _descriptor_from_lsblk(device: Dict[str, Any]) -> Dict[str, Any]:
    """Convert one lsblk disk node (with its partitions) to a raw descriptor"""
    path = device.get("path") or f"/dev/{device.get('name', '')}"
    mountpoints = [{"path": mountpoint} for mountpoint in _collect_mountpoints(device)]
    description = " ".join(
        part.strip() for part in (device.get("vendor"), device.get("model")) if part and part.strip()
    )

    return {
        "device": path,
        "displayName": path,
        "description": description,
        "size": device.get("size"),
        "mountpoints": mountpoints,
        "isSystem": any(m["path"] in SYSTEM_MOUNTPOINTS for m in mountpoints),
        "isRemovable": parse_flag(device.get("rm")) or parse_flag(device.get("hotplug")),
    }


def _collect_mountpoints(device: Dict[str, Any]) -> List[str]:
    """Recursively collect mountpoints from the lsblk tree"""
    result = []
    if device.get("mountpoint"):
        result.append(device["mountpoint"])
    for child in device.get("children") or []:
        result.extend(_collect_mountpoints(child))
    return result


class BlockDeviceAdapter(Adapter):
    """
    Adapter for fixed and removable block devices.

    System drives are filtered out unless include_system_drives says
    otherwise. The flag is read on every scan, so a callable can change
    the policy at runtime.
    """

    name = "block-device"

    def __init__(
        self,
        include_system_drives: Union[Callable[[], bool], bool, None] = None,
        lister: Optional[Lister] = None
    ):
        """
        Initialize the adapter.

        Args:
            include_system_drives: Zero-argument callable or bool (default False)
            lister: Device listing capability; defaults to list_drives

        Raises:
            ConfigurationError: If include_system_drives or lister is invalid
        """
        if include_system_drives is None:
            include_system_drives = False

        if isinstance(include_system_drives, bool):
            flag = include_system_drives
            self._include_system_drives = lambda: flag
        elif callable(include_system_drives):
            self._include_system_drives = include_system_drives
        else:
            raise ConfigurationError(
                f"include_system_drives must be a bool or a callable, "
                f"got {type(include_system_drives).__name__}"
            )

        if lister is not None and not callable(lister):
            raise ConfigurationError(f"lister must be callable, got {type(lister).__name__}")
        self._lister = lister

    def scan(self) -> List[Drive]:
        include_system = bool(self._include_system_drives())
        # Resolved at call time so the module-level lister can be swapped
        lister = self._lister or list_drives

        try:
            descriptors = lister(include_system)
        except ListingError:
            raise
        except Exception as e:
            raise ListingError(str(e)) from e

        drives: Dict[str, Drive] = {}
        for descriptor in descriptors:
            try:
                drive = Drive.from_descriptor(descriptor)
            except ValueError as e:
                raise ListingError(str(e)) from e

            if drive.is_system and not include_system:
                continue
            if drive.identity in drives:
                logger.debug(f"Duplicate drive {drive.identity} ignored")
                continue
            drives[drive.identity] = drive

        logger.debug(f"{self.name}: {len(drives)} drive(s) listed")
        return list(drives.values())
