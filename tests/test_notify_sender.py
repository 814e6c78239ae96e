"""
Tests for the Home Assistant notification sender.
"""

import requests

from drive_scanner.discovery.scanner import Scanner
from drive_scanner.notification import notify_sender
from drive_scanner.notification.notify_sender import NotifySender

from tests.helpers import make_drive


class FakeResponse:
    def __init__(self, status_code=200, text="ok"):
        self.status_code = status_code
        self.text = text


def capture_posts(monkeypatch, response=None, error=None):
    posts = []

    def fake_post(url, json=None, headers=None, timeout=None):
        posts.append({"url": url, "json": json, "headers": headers})
        if error is not None:
            raise error
        return response or FakeResponse()

    monkeypatch.setattr(notify_sender.requests, "post", fake_post)
    return posts


def test_without_token_only_logs(monkeypatch):
    monkeypatch.delenv("SUPERVISOR_TOKEN", raising=False)
    posts = capture_posts(monkeypatch)

    sender = NotifySender("mobile_app")

    assert sender.send_notification("Drive connected", "/dev/sdb") is False
    assert posts == []


def test_send_notification(monkeypatch):
    monkeypatch.setenv("SUPERVISOR_TOKEN", "secret")
    posts = capture_posts(monkeypatch)

    sender = NotifySender("mobile_app")

    assert sender.send_notification("Drive scan failed", "scan error", level="error") is True
    assert posts[0]["url"] == "http://supervisor/core/api/services/notify/mobile_app"
    assert posts[0]["headers"]["Authorization"] == "Bearer secret"
    assert posts[0]["json"] == {
        "title": "Drive scan failed",
        "message": "scan error",
        "data": {"importance": "error"},
    }


def test_http_error_returns_false(monkeypatch):
    monkeypatch.setenv("SUPERVISOR_TOKEN", "secret")
    capture_posts(monkeypatch, response=FakeResponse(500, "boom"))
    assert NotifySender().send_notification("title", "message") is False


def test_network_error_returns_false(monkeypatch):
    monkeypatch.setenv("SUPERVISOR_TOKEN", "secret")
    capture_posts(monkeypatch, error=requests.exceptions.ConnectionError("unreachable"))
    assert NotifySender().send_notification("title", "message") is False


def test_drive_events_are_forwarded(monkeypatch):
    monkeypatch.setenv("SUPERVISOR_TOKEN", "secret")
    posts = capture_posts(monkeypatch)
    sender = NotifySender("mobile_app")
    drive = make_drive("/dev/sdb", description="SanDisk Cruzer", size="14G", mountpoints=["/media/usb"])

    sender.on_drive_added(drive)
    sender.on_drive_removed(drive)

    assert [post["json"]["title"] for post in posts] == ["Drive connected", "Drive disconnected"]
    assert posts[0]["json"]["message"] == "/media/usb (/dev/sdb)\nSanDisk Cruzer\nSize: 14G"


def test_attach_and_detach():
    scanner = Scanner([], interval=60)
    sender = NotifySender()

    sender.attach(scanner)
    assert sender.on_drive_added in scanner.callbacks["add"]
    assert sender.on_drive_removed in scanner.callbacks["remove"]
    assert sender.on_scan_error in scanner.callbacks["error"]

    sender.detach(scanner)
    assert scanner.callbacks["add"] == []
    assert scanner.callbacks["remove"] == []
    assert scanner.callbacks["error"] == []
