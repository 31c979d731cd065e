"""Factory for creating page drivers."""

from __future__ import annotations

from typing import Any

from ui_scout.config import SUPPORTED_BACKENDS, ConfigurationError
from ui_scout.drivers.base import PageDriver


def create_driver(backend: str, page: Any) -> PageDriver:
    """
    Create a page driver based on backend name.

    Args:
        backend: Backend name ("playwright", "puppeteer", "snapshot")
        page: Backend page object. For "snapshot", a SnapshotDriver, a
            snapshot dict or the path of a snapshot JSON file

    Returns:
        Driver instance

    Raises:
        ConfigurationError: If the backend is not supported
    """
    backend_lower = (backend or "").lower()

    if backend_lower == "playwright":
        from ui_scout.drivers.playwright_driver import PlaywrightDriver
        return PlaywrightDriver(page)
    elif backend_lower == "puppeteer":
        from ui_scout.drivers.puppeteer_driver import PyppeteerDriver
        return PyppeteerDriver(page)
    elif backend_lower == "snapshot":
        from ui_scout.drivers.snapshot import SnapshotDriver
        if isinstance(page, SnapshotDriver):
            return page
        if isinstance(page, dict):
            return SnapshotDriver.from_dict(page)
        if isinstance(page, str):
            return SnapshotDriver.load(page)
        raise ConfigurationError(
            f"snapshot backend needs a SnapshotDriver, dict or file path, got {type(page).__name__}"
        )
    else:
        raise ConfigurationError(
            f"Unsupported backend: {backend}. "
            f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
        )
