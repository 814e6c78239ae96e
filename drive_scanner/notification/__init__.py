"""
Notification module for Home Assistant integration.
"""

from .notify_sender import NotifySender, Notification

__all__ = ["NotifySender", "Notification"]
