"""
Data models for the discovery pipeline.

Exports:
- DiscoveredFeature, ElementState, ElementSnapshot (feature.py)
- TestStep, Assertion, TestCase (test_case.py)
- TestResult, CategoryResult, DiscoveryReport, page analysis (report.py)
- Enums: FeatureType, ActionType, AssertionType
"""

from .feature import (
    DiscoveredFeature,
    ElementSnapshot,
    ElementState,
    FeatureType,
)

from .test_case import (
    ActionType,
    Assertion,
    AssertionType,
    TestCase,
    TestStep,
)

from .report import (
    AccessibilitySummary,
    CategoryResult,
    DiscoveryReport,
    FeatureStatistics,
    PageAnalysis,
    PageStructure,
    ReportRenderer,
    TestResult,
)

__all__ = [
    # Enums
    "FeatureType",
    "ActionType",
    "AssertionType",
    # Discovery
    "DiscoveredFeature",
    "ElementSnapshot",
    "ElementState",
    # Test cases
    "TestStep",
    "Assertion",
    "TestCase",
    # Results and report
    "TestResult",
    "CategoryResult",
    "DiscoveryReport",
    "FeatureStatistics",
    "PageAnalysis",
    "PageStructure",
    "AccessibilitySummary",
    "ReportRenderer",
]
