"""
UI Scout - Web UI feature discovery

Discovers the interactive features of a live web page (buttons, inputs,
navigation, composite components), synthesizes test cases for them,
runs those tests and reports the outcome.

## Architecture

DISCOVERY
- PageDriver: one interface over Playwright, Pyppeteer and recorded snapshots
- ButtonDiscovery, InputDiscovery, NavigationDiscovery, ComponentDiscovery
- DiscoveryService: aggregate scan with per-category results
- selector_engine: selector generation, validation and optimization

TESTING
- TestCaseSynthesizer: features to test cases
- TestExecutor: runs test cases, never raises

## Quick start

    from ui_scout import FeatureDiscoveryOrchestrator, ScoutConfig

    orchestrator = FeatureDiscoveryOrchestrator(
        "playwright",
        page,
        ScoutConfig(output_dir="/tmp/ui-scout"),
    )
    report = await orchestrator.run("http://localhost:3000")
    print(f"{report.features_discovered} features, {report.failed} failing tests")
"""

# Orchestration
from .orchestrator import FeatureDiscoveryOrchestrator
from .coordinator import FeatureDiscoveryCoordinator
from .config import ScoutConfig, ConfigurationError, SUPPORTED_BACKENDS

# Drivers
from .drivers import (
    PageDriver,
    Locator,
    ElementHandle,
    DriverError,
    ElementNotFoundError,
    DriverTimeoutError,
    SnapshotDriver,
    ElementRecord,
    create_driver,
)

# Discovery
from .discovery import (
    BaseDiscovery,
    ButtonDiscovery,
    InputDiscovery,
    NavigationDiscovery,
    ComponentDiscovery,
    GenericDiscoveryService,
    DiscoveryService,
    AnalysisService,
)

# Selectors
from .selector_engine import (
    generate_selector,
    is_valid_selector,
    optimize_selector,
    unique_selector,
)

# Testing
from .synthesis import TestCaseSynthesizer, in_page_links
from .execution import TestExecutor, AssertionFailedError

# Data models
from .models import (
    DiscoveredFeature,
    ElementSnapshot,
    ElementState,
    FeatureType,
    ActionType,
    AssertionType,
    TestStep,
    Assertion,
    TestCase,
    TestResult,
    CategoryResult,
    DiscoveryReport,
    PageAnalysis,
)

__version__ = "1.0.0"

__all__ = [
    # Orchestration
    "FeatureDiscoveryOrchestrator",
    "FeatureDiscoveryCoordinator",
    "ScoutConfig",
    "ConfigurationError",
    "SUPPORTED_BACKENDS",
    # Drivers
    "PageDriver",
    "Locator",
    "ElementHandle",
    "DriverError",
    "ElementNotFoundError",
    "DriverTimeoutError",
    "SnapshotDriver",
    "ElementRecord",
    "create_driver",
    # Discovery
    "BaseDiscovery",
    "ButtonDiscovery",
    "InputDiscovery",
    "NavigationDiscovery",
    "ComponentDiscovery",
    "GenericDiscoveryService",
    "DiscoveryService",
    "AnalysisService",
    # Selectors
    "generate_selector",
    "is_valid_selector",
    "optimize_selector",
    "unique_selector",
    # Testing
    "TestCaseSynthesizer",
    "in_page_links",
    "TestExecutor",
    "AssertionFailedError",
    # Models
    "DiscoveredFeature",
    "ElementSnapshot",
    "ElementState",
    "FeatureType",
    "ActionType",
    "AssertionType",
    "TestStep",
    "Assertion",
    "TestCase",
    "TestResult",
    "CategoryResult",
    "DiscoveryReport",
    "PageAnalysis",
]
