"""
Test case synthesis.

Turns discovered features into executable TestCases. Every TestCase
references the feature object it was built from; the synthesizer never
fabricates or copies features.
"""

from typing import Callable, Optional, Sequence

import structlog

from ui_scout.discovery.navigation import NavigationDiscovery
from ui_scout.models import (
    ActionType,
    Assertion,
    AssertionType,
    DiscoveredFeature,
    FeatureType,
    TestCase,
    TestStep,
)

logger = structlog.get_logger(__name__)

ValueSource = Callable[[str], str]
NavigationHandler = Callable[[DiscoveredFeature], Sequence[DiscoveredFeature]]

DEFAULT_VALUE = "Test Value"

CHECKABLE_TYPES = ("checkbox", "radio")


def in_page_links(feature: DiscoveredFeature, limit: int = 5) -> list[DiscoveredFeature]:
    """
    Navigation handler selecting links that keep the browser on the page.

    Fragment links, javascript: links and children without an href
    qualify; at most `limit` are returned.
    """
    selected = []
    for child in feature.children:
        href = (child.attribute("href") or "").strip()
        if not href or href.startswith("#") or href.lower().startswith("javascript:"):
            selected.append(child)
        if len(selected) >= limit:
            break
    return selected


class TestCaseSynthesizer:
    """
    Maps features to test cases by feature type.

    Args:
        value_source: Returns the value to type into an input of a given
            semantic type (e.g. InputDiscovery.get_test_value_for_input)
        navigation_handler: Selects which child links of a navigation
            feature to click; without one a single representative click
            is generated
    """
    __test__ = False

    def __init__(
        self,
        value_source: Optional[ValueSource] = None,
        navigation_handler: Optional[NavigationHandler] = None,
    ):
        self.value_source = value_source
        self.navigation_handler = navigation_handler

    def generate_test_cases(self, features: Sequence[DiscoveredFeature]) -> list[TestCase]:
        test_cases = []

        for feature in features or ():
            test_case = self.create_test_case(feature)
            if test_case is not None:
                test_cases.append(test_case)

        logger.info("synthesis.generated", features=len(features or ()), test_cases=len(test_cases))
        return test_cases

    def create_test_case(self, feature: DiscoveredFeature) -> Optional[TestCase]:
        if feature is None:
            return None

        if feature.type == FeatureType.BUTTON:
            return self._button(feature)
        if feature.type == FeatureType.INPUT:
            return self._input(feature)
        if feature.type in (FeatureType.NAVIGATION, FeatureType.MENU, FeatureType.TAB):
            return self._navigation(feature)
        if feature.type == FeatureType.DROPDOWN:
            return self._dropdown(feature)
        return self._visible_only(feature)

    def _visible(self, feature: DiscoveredFeature) -> Assertion:
        return Assertion(
            type=AssertionType.VISIBLE,
            selector=feature.selector,
            description=f"{feature.name} should be visible",
        )

    def _visible_only(self, feature: DiscoveredFeature) -> TestCase:
        return TestCase(feature=feature, assertions=[self._visible(feature)])

    def _button(self, feature: DiscoveredFeature) -> TestCase:
        if not feature.is_visible:
            return TestCase(feature=feature, assertions=[
                Assertion(
                    type=AssertionType.HIDDEN,
                    selector=feature.selector,
                    description=f"{feature.name} should be hidden",
                ),
            ])

        if not feature.is_enabled:
            return TestCase(feature=feature, assertions=[
                self._visible(feature),
                Assertion(
                    type=AssertionType.DISABLED,
                    selector=feature.selector,
                    description=f"{feature.name} should be disabled",
                ),
            ])

        return TestCase(
            feature=feature,
            steps=[TestStep(
                action=ActionType.CLICK,
                selector=feature.selector,
                description=f"Click {feature.name}",
            )],
            assertions=[
                self._visible(feature),
                Assertion(
                    type=AssertionType.ENABLED,
                    selector=feature.selector,
                    description=f"{feature.name} should be enabled",
                ),
            ],
        )

    def _input(self, feature: DiscoveredFeature) -> TestCase:
        semantic_type = feature.attribute("semanticType") or feature.attribute("type") or "text"

        if semantic_type in CHECKABLE_TYPES:
            return TestCase(
                feature=feature,
                steps=[TestStep(
                    action=ActionType.CHECK,
                    selector=feature.selector,
                    description=f"Check {feature.name}",
                )],
                assertions=[Assertion(
                    type=AssertionType.ENABLED,
                    selector=feature.selector,
                    description=f"{feature.name} should stay enabled",
                )],
            )

        value = self.value_source(semantic_type) if self.value_source else None
        value = value or DEFAULT_VALUE

        return TestCase(
            feature=feature,
            steps=[TestStep(
                action=ActionType.FILL,
                selector=feature.selector,
                value=value,
                description=f"Fill {feature.name} with a {semantic_type} value",
            )],
            assertions=[Assertion(
                type=AssertionType.ATTRIBUTE,
                selector=feature.selector,
                expected={"value": value},
                description=f"{feature.name} should accept the value",
            )],
        )

    def _navigation(self, feature: DiscoveredFeature) -> TestCase:
        if self.navigation_handler is not None:
            targets = list(self.navigation_handler(feature) or ())
        else:
            targets = list(feature.children[:1]) or [feature]

        steps = [
            TestStep(
                action=ActionType.CLICK,
                selector=target.selector,
                description=f"Click {target.name}",
            )
            for target in targets
        ]

        return TestCase(feature=feature, steps=steps, assertions=[self._visible(feature)])

    def _dropdown(self, feature: DiscoveredFeature) -> TestCase:
        options = NavigationDiscovery.dropdown_options(feature)
        if not options:
            return self._visible_only(feature)

        return TestCase(
            feature=feature,
            steps=[TestStep(
                action=ActionType.SELECT,
                selector=feature.selector,
                value=options[0],
                description=f"Select {options[0]} in {feature.name}",
            )],
            assertions=[self._visible(feature)],
        )
