#!/usr/bin/env python3
"""UI Scout CLI.

Command-line interface for discovering features on a web page. This is
the only place where a browser is launched; the library itself always
works on a page owned by the caller.

Usage:
    ui-scout discover URL                     # Discover, generate and run tests
    ui-scout discover URL --no-execute        # Discover and generate only
    ui-scout discover URL -b snapshot --snapshot page.json
    ui-scout validate SELECTOR [SELECTOR...]  # Check selector syntax
    ui-scout report FILE                      # Summarize a saved report
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from ui_scout.config import ConfigurationError, ScoutConfig
from ui_scout.models import DiscoveryReport
from ui_scout.orchestrator import FeatureDiscoveryOrchestrator
from ui_scout.selector_engine import is_valid_selector
from ui_scout.utils import configure_logging


def load_config(args) -> ScoutConfig:
    """Build the run config: file or environment, then command-line overrides."""
    config = ScoutConfig.load(args.config) if args.config else ScoutConfig.from_env()

    overrides = {}
    if args.backend:
        overrides["backend"] = args.backend
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.screenshot_dir:
        overrides["screenshot_dir"] = args.screenshot_dir
    if args.timeout:
        overrides["timeout"] = args.timeout
    if args.no_execute:
        overrides["execute_tests"] = False
    if args.dynamic:
        overrides["discover_dynamic"] = True
    if args.analyze:
        overrides["analyze_page"] = True
    if args.screenshot:
        overrides["capture_screenshot"] = True

    return replace(config, **overrides)


def print_summary(report: DiscoveryReport) -> None:
    stats = report.statistics

    print("=" * 50)
    print(f"UI Scout: {report.url}")
    print("=" * 50)
    print(f"Features:    {report.features_discovered}")
    for feature_type, count in sorted(stats.by_type.items()):
        print(f"  {feature_type:<12} {count}")
    print(f"Interactive: {stats.interactive}")
    print(f"Test cases:  {len(report.test_cases)}")
    if report.test_results:
        print(f"Passed:      {report.passed}")
        print(f"Failed:      {report.failed}")
        for result in report.test_results:
            if not result.success:
                print(f"  \033[91m✗\033[0m {result.test_case.name}: {result.error}")
    if report.analysis:
        print(f"A11y score:  {report.analysis.accessibility.score}/100")
    print()


async def _discover_playwright(args, config: ScoutConfig) -> DiscoveryReport:
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=not args.headed)
        try:
            page = await browser.new_page()
            orchestrator = FeatureDiscoveryOrchestrator("playwright", page, config)
            return await orchestrator.run(args.url)
        finally:
            await browser.close()


async def _discover_puppeteer(args, config: ScoutConfig) -> DiscoveryReport:
    from pyppeteer import launch

    browser = await launch(headless=not args.headed)
    try:
        page = await browser.newPage()
        orchestrator = FeatureDiscoveryOrchestrator("puppeteer", page, config)
        return await orchestrator.run(args.url)
    finally:
        await browser.close()


async def _discover_snapshot(args, config: ScoutConfig) -> DiscoveryReport:
    if not args.snapshot:
        raise ConfigurationError("--snapshot FILE is required with the snapshot backend")
    orchestrator = FeatureDiscoveryOrchestrator("snapshot", args.snapshot, config)
    return await orchestrator.run(args.url)


def cmd_discover(args):
    """Run discovery on a URL."""
    config = load_config(args)
    runners = {
        "playwright": _discover_playwright,
        "puppeteer": _discover_puppeteer,
        "snapshot": _discover_snapshot,
    }

    try:
        config.validate()
        report = asyncio.run(runners[config.backend](args, config))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_summary(report)

    return 1 if report.failed else 0


def cmd_validate(args):
    """Check selector syntax."""
    invalid = 0
    for selector in args.selectors:
        valid = is_valid_selector(selector)
        invalid += not valid
        mark = "\033[92m✓\033[0m" if valid else "\033[91m✗\033[0m"
        print(f"{mark} {selector}")
    return 1 if invalid else 0


def cmd_report(args):
    """Summarize a saved report."""
    print_summary(DiscoveryReport.load(args.file))
    return 0


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="ui-scout",
        description="UI Scout - web UI feature discovery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    ui-scout discover https://example.com -o out/
    ui-scout discover https://example.com --dynamic --analyze
    ui-scout validate "#main > .item" "##bad"
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Discover
    discover_p = subparsers.add_parser("discover", help="Discover features on a URL")
    discover_p.add_argument("url", help="URL to scan")
    discover_p.add_argument("-b", "--backend", help="playwright, puppeteer or snapshot")
    discover_p.add_argument("-c", "--config", help="JSON config file")
    discover_p.add_argument("-o", "--output-dir", help="Directory for the JSON report")
    discover_p.add_argument("--screenshot-dir", help="Directory for screenshots")
    discover_p.add_argument("-t", "--timeout", type=float, help="Per-call timeout in seconds")
    discover_p.add_argument("--snapshot", help="Snapshot file for the snapshot backend")
    discover_p.add_argument("--no-execute", action="store_true", help="Generate tests without running them")
    discover_p.add_argument("--dynamic", action="store_true", help="Hover menus to find dynamic elements")
    discover_p.add_argument("--analyze", action="store_true", help="Add page structure and accessibility analysis")
    discover_p.add_argument("--screenshot", action="store_true", help="Capture a page screenshot")
    discover_p.add_argument("--headed", action="store_true", help="Show the browser window")
    discover_p.add_argument("--json", action="store_true", help="Print the report as JSON")

    # Validate
    validate_p = subparsers.add_parser("validate", help="Check selector syntax")
    validate_p.add_argument("selectors", nargs="+", help="Selectors to check")

    # Report
    report_p = subparsers.add_parser("report", help="Summarize a saved report")
    report_p.add_argument("file", help="Report JSON file")

    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    commands = {
        "discover": cmd_discover,
        "validate": cmd_validate,
        "report": cmd_report,
    }

    if args.command in commands:
        return commands[args.command](args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
