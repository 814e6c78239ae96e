#!/usr/bin/env python3
"""
Notification sender for drive events.
Forwards scanner notifications to a Home Assistant notify service.
Uses SUPERVISOR_TOKEN for authentication.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)

@dataclass
class Notification:
    """Notification data structure"""
    title: str
    message: str
    level: str = "info"  # info, warning, error

class NotifySender:
    """
    Client for sending notifications via Home Assistant notify services.

    attach() subscribes it to a scanner's add/remove/error events.
    """

    def __init__(self, notify_service: str = "notification_channel", base_url: str = "http://supervisor"):
        """
        Initialize notification sender.

        Args:
            notify_service: Name of the notify service, used as 'notify.{notify_service}'
            base_url: Supervisor API base URL
        """
        self.notify_service = notify_service
        self.full_service = f"notify.{notify_service}"
        self.token = os.environ.get("SUPERVISOR_TOKEN")
        self.base_url = base_url.rstrip("/")

        if not self.token:
            logger.warning("SUPERVISOR_TOKEN not found. Notifications will be logged only.")

        logger.debug(f"NotifySender initialized with service: {self.full_service}")

    def send_notification(self, title: str, message: str, level: str = "info") -> bool:
        """
        Send notification via notify service.

        Returns:
            True if the notification was delivered
        """
        notification = Notification(title=title, message=message, level=level)
        logger.info(f"Notification [{level.upper()}] via {self.full_service}: {title}")

        if not self.token:
            return False

        return self._send_via_api(notification)

    def attach(self, scanner) -> None:
        """Subscribe to a scanner's add/remove/error events"""
        scanner.register_callback("add", self.on_drive_added)
        scanner.register_callback("remove", self.on_drive_removed)
        scanner.register_callback("error", self.on_scan_error)

    def detach(self, scanner) -> None:
        scanner.unregister_callback("add", self.on_drive_added)
        scanner.unregister_callback("remove", self.on_drive_removed)
        scanner.unregister_callback("error", self.on_scan_error)

    def on_drive_added(self, drive) -> None:
        self.send_notification("Drive connected", _describe(drive))

    def on_drive_removed(self, drive) -> None:
        self.send_notification("Drive disconnected", _describe(drive))

    def on_scan_error(self, error) -> None:
        self.send_notification("Drive scan failed", str(error), level="error")

    def _send_via_api(self, notification: Notification) -> bool:
        url = f"{self.base_url}/core/api/services/notify/{self.notify_service}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json"
        }
        data: Dict[str, Any] = {
            "title": notification.title,
            "message": notification.message,
            "data": {"importance": notification.level},
        }

        try:
            response = requests.post(url, json=data, headers=headers, timeout=10)
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error sending notification: {e}")
            return False

        if response.status_code == 200:
            logger.debug(f"Notification sent: {notification.title}")
            return True

        logger.error(f"Failed to send notification: {response.status_code} - {response.text}")
        return False


def _describe(drive) -> str:
    lines = [f"{drive.display_name} ({drive.identity})"]
    if drive.description:
        lines.append(drive.description)
    if drive.size is not None:
        lines.append(f"Size: {drive.size}")
    return "\n".join(lines)
