"""
Page drivers.

Exports the abstract interface, the dependency-free snapshot backend and
the factory. The Playwright and Pyppeteer adapters are imported on demand
by create_driver.
"""

from .base import (
    DriverError,
    DriverTimeoutError,
    ElementHandle,
    ElementNotFoundError,
    Locator,
    PageDriver,
)
from .snapshot import ElementRecord, SnapshotDriver
from .factory import create_driver

__all__ = [
    "PageDriver",
    "Locator",
    "ElementHandle",
    "DriverError",
    "ElementNotFoundError",
    "DriverTimeoutError",
    "SnapshotDriver",
    "ElementRecord",
    "create_driver",
]
