"""
Data models for execution results and the discovery report.

The DiscoveryReport is a pure projection of its feature list: the feature
count and the statistics block are recomputed on every access.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol, Sequence
import json

from ui_scout.models.feature import DiscoveredFeature
from ui_scout.models.test_case import TestCase


@dataclass
class TestResult:
    """Outcome of executing one TestCase."""
    __test__ = False

    test_case: TestCase
    success: bool
    duration: float = 0.0
    error: Optional[str] = None
    screenshot: Optional[str] = None

    @property
    def duration_ms(self) -> int:
        return int(self.duration * 1000)

    def to_dict(self) -> dict:
        return {
            "feature": self.test_case.feature.name,
            "success": self.success,
            "error": self.error,
            "duration": self.duration,
            "durationMs": self.duration_ms,
            "screenshot": self.screenshot,
        }


@dataclass
class CategoryResult:
    """
    Outcome of one discovery category.

    A category that failed carries the reason and no features, so the
    aggregate scan can continue without losing sight of the failure.
    """
    category: str
    features: list[DiscoveredFeature] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, category: str, error: str) -> "CategoryResult":
        return cls(category=category, features=[], error=error)


@dataclass
class PageStructure:
    """Counts of structural and interactive elements on a page."""
    title: str
    headers: int = 0
    navs: int = 0
    main_content: int = 0
    asides: int = 0
    footers: int = 0
    forms: int = 0
    buttons: int = 0
    links: int = 0
    inputs: int = 0

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "layout": {
                "headers": self.headers,
                "navs": self.navs,
                "mainContent": self.main_content,
                "asides": self.asides,
                "footers": self.footers,
            },
            "interactive": {
                "forms": self.forms,
                "buttons": self.buttons,
                "links": self.links,
                "inputs": self.inputs,
            },
        }


@dataclass
class AccessibilitySummary:
    """Counts of accessibility markers and a heuristic 0-100 score."""
    aria_labels: int = 0
    aria_roles: int = 0
    alt_texts: int = 0
    tabindex_elements: int = 0

    @property
    def score(self) -> int:
        score = 50

        if self.aria_labels > 10:
            score += 15
        elif self.aria_labels > 5:
            score += 10
        elif self.aria_labels > 0:
            score += 5

        if self.aria_roles > 10:
            score += 15
        elif self.aria_roles > 5:
            score += 10
        elif self.aria_roles > 0:
            score += 5

        if self.alt_texts > 5:
            score += 20
        elif self.alt_texts > 0:
            score += 10

        return min(score, 100)

    def to_dict(self) -> dict:
        return {
            "ariaLabels": self.aria_labels,
            "ariaRoles": self.aria_roles,
            "altTexts": self.alt_texts,
            "tabindexElements": self.tabindex_elements,
            "score": self.score,
        }


@dataclass
class PageAnalysis:
    url: str
    structure: PageStructure
    accessibility: AccessibilitySummary

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "structure": self.structure.to_dict(),
            "accessibility": self.accessibility.to_dict(),
        }


@dataclass
class FeatureStatistics:
    """Derived counts over a feature list."""
    by_type: dict[str, int]
    interactive: int
    with_text: int
    with_attributes: int

    @classmethod
    def from_features(cls, features: Sequence[DiscoveredFeature]) -> "FeatureStatistics":
        return cls(
            by_type=dict(Counter(f.type.value for f in features)),
            interactive=sum(1 for f in features if f.is_interactive),
            with_text=sum(1 for f in features if f.text),
            with_attributes=sum(1 for f in features if f.attributes),
        )

    def to_dict(self) -> dict:
        return {
            "byType": dict(self.by_type),
            "interactive": self.interactive,
            "withText": self.with_text,
            "withAttributes": self.with_attributes,
        }


@dataclass
class DiscoveryReport:
    """
    Result of one discovery run.

    Only `timestamp`, `url`, `features` and `test_cases` are persisted;
    `test_results` and `analysis` travel with the in-memory report for
    renderers.
    """
    url: str
    features: list[DiscoveredFeature] = field(default_factory=list)
    test_cases: list[TestCase] = field(default_factory=list)
    test_results: list[TestResult] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    analysis: Optional[PageAnalysis] = None
    screenshot: Optional[bytes] = None

    @property
    def features_discovered(self) -> int:
        return len(self.features)

    @property
    def statistics(self) -> FeatureStatistics:
        return FeatureStatistics.from_features(self.features)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.test_results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.test_results if not r.success)

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "url": self.url,
            "featuresDiscovered": self.features_discovered,
            "features": [f.to_dict() for f in self.features],
            "testCases": [tc.to_dict() for tc in self.test_cases],
            "statistics": self.statistics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DiscoveryReport":
        """
        Build from the persisted JSON shape.

        Derived fields (featuresDiscovered, statistics) are ignored and
        recomputed from the features. Each test case is relinked to the
        loaded feature it was synthesized from, matched by selector.
        """
        features = [DiscoveredFeature.from_dict(f) for f in data.get("features", [])]
        by_selector = {}
        for feature in features:
            by_selector.setdefault(feature.selector, feature)

        test_cases = []
        for tc_data in data.get("testCases", []):
            test_case = TestCase.from_dict(tc_data)
            test_case.feature = by_selector.get(test_case.feature.selector, test_case.feature)
            test_cases.append(test_case)

        return cls(
            url=data["url"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            features=features,
            test_cases=test_cases,
        )

    def save(self, filepath: str) -> None:
        """Write the report as JSON."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, filepath: str) -> "DiscoveryReport":
        """Read a report written by save()."""
        with open(filepath, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


class ReportRenderer(Protocol):
    """External renderer (HTML, Markdown, ...) fed with the run's results."""

    def render(
        self,
        features: Sequence[DiscoveredFeature],
        test_cases: Sequence[TestCase],
        test_results: Sequence[TestResult],
        output_path: str,
    ) -> None:
        ...
