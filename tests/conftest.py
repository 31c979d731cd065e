"""Shared fixtures: snapshot pages and failure-injecting drivers."""

import os

import pytest

from ui_scout.config import ENV_PREFIX
from ui_scout.drivers import DriverError, ElementRecord, Locator, SnapshotDriver


def element(tag, *selectors, **fields):
    """(selectors, ElementRecord) pair for SnapshotDriver."""
    return list(selectors), ElementRecord(tag=tag, **fields)


class FailingLocator(Locator):
    async def count(self):
        raise DriverError(f"count rejected for {self.selector}", self.selector)

    def nth(self, index):
        raise DriverError(f"nth rejected for {self.selector}", self.selector)


class PartiallyFailingDriver(SnapshotDriver):
    """Snapshot driver whose locators fail for the given selectors."""

    def __init__(self, failing, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.failing = set(failing)

    def locate(self, selector):
        if selector in self.failing:
            return FailingLocator(selector)
        return super().locate(selector)


class RejectingDriver(SnapshotDriver):
    """Every page operation fails."""

    async def navigate(self, url, timeout=None):
        raise DriverError(f"navigation to {url} rejected")

    def locate(self, selector):
        return FailingLocator(selector)


@pytest.fixture
def clean_env(monkeypatch):
    """No UI_SCOUT_* variables before or after the test, .env included."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            del os.environ[key]


@pytest.fixture
def submit_page():
    """One visible, enabled button with a test id and text Submit."""
    return SnapshotDriver(
        [element("button", "button", '[data-testid="submit-btn"]',
                 attributes={"data-testid": "submit-btn"}, text="Submit")],
        url="https://example.com",
        title="Example",
    )


@pytest.fixture
def form_page():
    """Email field with a label, a disabled button and a hidden button."""
    return SnapshotDriver(
        [
            element("label", 'label[for="email"]', text="Email address"),
            element("input", 'input[type="email"]', "#email",
                    attributes={"type": "email", "id": "email", "name": "email"}),
            element("input", 'input[type="checkbox"]', "#terms",
                    attributes={"type": "checkbox", "id": "terms"}),
            element("button", "button", "#save",
                    attributes={"id": "save", "type": "submit"}, text="Save"),
            element("button", "button", "#delete",
                    attributes={"id": "delete", "disabled": ""}, text="Delete", enabled=False),
            element("button", "button", "#ghost",
                    attributes={"id": "ghost"}, text="Ghost", visible=False),
        ],
        url="https://example.com/form",
        title="Form",
    )


@pytest.fixture
def nav_page():
    """Navigation bar with two links, a country dropdown and a tab group."""
    return SnapshotDriver(
        [
            element("nav", "nav", "#main-nav",
                    attributes={"id": "main-nav", "aria-label": "Main"}, text="Home About",
                    reveals=[".submenu"]),
            element("a", "#main-nav a[href]", "#home-link",
                    attributes={"id": "home-link", "href": "#home"}, text="Home"),
            element("a", "#main-nav a[href]", "#about-link",
                    attributes={"id": "about-link", "href": "/about"}, text="About"),
            element("ul", ".submenu", "#products-menu",
                    attributes={"id": "products-menu", "class": "submenu"}, text="Products",
                    visible=False),
            element("select", "select", "#country",
                    attributes={"id": "country", "name": "country"}, options=["France", "Japan"]),
            element("option", "#country option", text="France"),
            element("option", "#country option", text="Japan"),
            element("div", '[role="tablist"]', "#tabs",
                    attributes={"id": "tabs", "role": "tablist"}),
            element("button", '#tabs [role="tab"]', "#tab-overview",
                    attributes={"id": "tab-overview", "role": "tab"}, text="Overview"),
            element("button", '#tabs [role="tab"]', "#tab-details",
                    attributes={"id": "tab-details", "role": "tab"}, text="Details"),
        ],
        url="https://example.com/nav",
    )
