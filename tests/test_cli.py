"""Tests for the ui-scout command line."""

import json
import logging

import pytest

from ui_scout.cli import main
from ui_scout.models import DiscoveredFeature, DiscoveryReport, FeatureType

SNAPSHOT = {
    "url": "about:blank",
    "title": "Checkout",
    "elements": [
        {"selectors": ["button", "#pay"], "tag": "button", "attributes": {"id": "pay"}, "text": "Pay"},
    ],
}


@pytest.fixture(autouse=True)
def detach_log_handler():
    """main() attaches a handler bound to the captured stderr of the current test."""
    yield
    logging.getLogger("ui_scout").handlers.clear()


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "checkout.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return str(path)


class TestValidateCommand:
    """ui-scout validate"""

    def test_all_valid(self, capsys):
        assert main(["validate", "#ok", "nav > a"]) == 0
        assert "#ok" in capsys.readouterr().out

    def test_invalid_selector(self, capsys):
        assert main(["validate", "#ok", "##bad"]) == 1
        assert "##bad" in capsys.readouterr().out


class TestDiscoverCommand:
    """ui-scout discover"""

    def test_snapshot_json(self, clean_env, snapshot_file, tmp_path, capsys):
        output_dir = tmp_path / "out"

        code = main([
            "discover", "https://shop.example.com/checkout",
            "-b", "snapshot", "--snapshot", snapshot_file,
            "-o", str(output_dir), "--json",
        ])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["url"] == "https://shop.example.com/checkout"
        assert data["featuresDiscovered"] == 1
        assert data["features"][0]["selector"] == "#pay"
        assert (output_dir / "feature-discovery-report.json").exists()

    def test_summary(self, clean_env, snapshot_file, capsys):
        code = main(["discover", "https://shop.example.com", "-b", "snapshot", "--snapshot", snapshot_file])

        assert code == 0
        out = capsys.readouterr().out
        assert "Features:    1" in out
        assert "Passed:      1" in out

    def test_config_file(self, clean_env, snapshot_file, tmp_path, capsys):
        config_file = tmp_path / "scout.json"
        config_file.write_text(json.dumps({"backend": "snapshot", "execute_tests": False}), encoding="utf-8")

        code = main(["discover", "https://shop.example.com", "-c", str(config_file), "--snapshot", snapshot_file])

        assert code == 0
        assert "Passed:" not in capsys.readouterr().out

    def test_unknown_backend(self, clean_env, capsys):
        assert main(["discover", "https://example.com", "-b", "selenium"]) == 2
        assert "Unsupported backend" in capsys.readouterr().err

    def test_snapshot_backend_needs_file(self, clean_env, capsys):
        assert main(["discover", "https://example.com", "-b", "snapshot"]) == 2
        assert "--snapshot" in capsys.readouterr().err


class TestReportCommand:
    """ui-scout report"""

    def test_summarize_saved_report(self, tmp_path, capsys):
        path = tmp_path / "report.json"
        DiscoveryReport(
            url="https://example.com",
            features=[DiscoveredFeature(name="Go", type=FeatureType.BUTTON, selector="#go", actions=("click",))],
        ).save(str(path))

        assert main(["report", str(path)]) == 0

        out = capsys.readouterr().out
        assert "UI Scout: https://example.com" in out
        assert "button" in out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: ui-scout" in capsys.readouterr().out
