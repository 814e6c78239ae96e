"""
Shared fixtures for the drive scanner tests.
"""

import logging

import pytest

from drive_scanner.discovery.adapters import block_device


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("drive_scanner")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def stub_list_drives(monkeypatch):
    """Replace the lsblk lister with canned descriptors"""
    calls = []

    def install(result):
        def fake_list_drives(include_system=False):
            calls.append(include_system)
            if isinstance(result, Exception):
                raise result
            return [dict(descriptor) for descriptor in result]

        monkeypatch.setattr(block_device, "list_drives", fake_list_drives)
        return calls

    return install
