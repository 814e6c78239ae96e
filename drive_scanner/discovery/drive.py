#!/usr/bin/env python3
"""
Canonical drive entity.
Normalizes the raw descriptors returned by device listers into one fixed shape.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

MOUNTPOINT_SEPARATOR = ", "
TRUE_STRINGS = {"1", "true", "yes", "on"}
FALSE_STRINGS = {"0", "false", "no", "off", ""}

@dataclass(frozen=True, eq=False)
class Drive:
    """One storage device, identified by its raw device path/handle"""
    identity: str                  # e.g. "/dev/sdb", "\\\\.\\PHYSICALDRIVE1"
    display_name: str              # mountpoints joined, or the device path
    description: str               # vendor/model string
    size: Any                      # passed through as reported ("14G", 15032385536)
    mountpoints: Tuple[str, ...] = ()
    is_system: bool = False
    is_removable: bool = False
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def __eq__(self, other):
        if not isinstance(other, Drive):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self):
        return hash(self.identity)

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "Drive":
        """
        Build a Drive from a raw descriptor.

        Args:
            descriptor: Mapping with at least a "device" key. Optional keys:
                "raw", "displayName", "description", "size", "mountpoints"
                (list of {"path": ...} mappings or strings), "isSystem",
                "isRemovable".

        Returns:
            Drive instance

        Raises:
            ValueError: If the descriptor is not a mapping, has no device path
                or carries a flag that is not a boolean
        """
        if not isinstance(descriptor, Mapping):
            raise ValueError(f"Descriptor must be a mapping, got {type(descriptor).__name__}")

        device = descriptor.get("device")
        if not device:
            raise ValueError(f"Descriptor has no device path: {dict(descriptor)!r}")

        identity = str(descriptor.get("raw") or device)
        mountpoints = _mountpoint_paths(descriptor.get("mountpoints"))

        return cls(
            identity=identity,
            display_name=display_name_for(identity, mountpoints),
            description=str(descriptor.get("description") or ""),
            size=descriptor.get("size"),
            mountpoints=mountpoints,
            is_system=parse_flag(descriptor.get("isSystem", False)),
            is_removable=parse_flag(descriptor.get("isRemovable", False)),
            raw=MappingProxyType(dict(descriptor)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view (for JSON output and notifications)"""
        return {
            "identity": self.identity,
            "display_name": self.display_name,
            "description": self.description,
            "size": self.size,
            "mountpoints": list(self.mountpoints),
            "is_system": self.is_system,
            "is_removable": self.is_removable,
        }


def normalize_descriptor(descriptor: Mapping[str, Any]) -> Drive:
    """Shortcut for Drive.from_descriptor"""
    return Drive.from_descriptor(descriptor)


def display_name_for(device_path: str, mountpoints: Tuple[str, ...]) -> str:
    """
    Human readable label for a drive.

    >>> display_name_for("/dev/sdb", ())
    '/dev/sdb'
    >>> display_name_for("PHYSICALDRIVE3", ("F:", "G:", "H:"))
    'F:, G:, H:'
    """
    if mountpoints:
        return MOUNTPOINT_SEPARATOR.join(mountpoints)
    return device_path


def parse_flag(value: Any) -> bool:
    """
    Boolean from a descriptor or options value.
    Accepts bools, None, 0/1 and the strings "true"/"false", "yes"/"no", "on"/"off", "1"/"0".

    Raises:
        ValueError: For anything else
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def _mountpoint_paths(mountpoints: Optional[Any]) -> Tuple[str, ...]:
    """Extract non-empty mount paths, keeping the lister's order"""
    if not mountpoints:
        return ()

    paths = []
    for mountpoint in mountpoints:
        if isinstance(mountpoint, Mapping):
            path = mountpoint.get("path")
        else:
            path = mountpoint
        if path:
            paths.append(str(path))
    return tuple(paths)
