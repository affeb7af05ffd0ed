"""Tests for the command-line entry point."""

import json
import sys

import pytest
import yaml

from property_scanner import main as main_module
from property_scanner.scanner import MarketScanner


@pytest.fixture
def config_file(tmp_path, criteria):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"criteria": criteria, "email": {"enabled": False}}))
    return path


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main_module, "setup_logging", lambda level=None: None)


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["property-scanner", *args])
    main_module.main()


class TestMain:
    def test_missing_config_exits(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "-c", str(tmp_path / "missing.yaml"))
        assert exc.value.code == 1

    def test_scan_prints_json(
        self, monkeypatch, capsys, config_file, listing_source, rent_estimator, sample_listing
    ):
        listing_source.listings_by_city["Memphis"] = [sample_listing]
        scanner = MarketScanner(listing_source, rent_estimator, request_delay=0)
        monkeypatch.setattr(main_module, "build_scanner", lambda settings: scanner)

        _run(monkeypatch, "-c", str(config_file), "--market", "Memphis, TN", "--json", "--no-email")

        output = capsys.readouterr().out
        data = json.loads(output[output.index("{"):])
        assert data["stats"]["total"] == 1
        assert data["properties"][0]["monthlyMortgage"] == 959

    def test_scan_prints_summary(
        self, monkeypatch, capsys, config_file, listing_source, rent_estimator, sample_listing
    ):
        listing_source.listings_by_city["Cleveland"] = [sample_listing]
        scanner = MarketScanner(listing_source, rent_estimator, request_delay=0)
        monkeypatch.setattr(main_module, "build_scanner", lambda settings: scanner)

        _run(monkeypatch, "-c", str(config_file))

        output = capsys.readouterr().out
        assert "Good deals: 0" in output
        assert "123 Main St" in output

    def test_test_email_failure_exits(self, monkeypatch, config_file, dispatcher, mail_transport):
        mail_transport.fail = True
        monkeypatch.setattr(main_module, "build_dispatcher", lambda settings: dispatcher)

        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "-c", str(config_file), "--test-email")
        assert exc.value.code == 1

    def test_test_email_success(self, monkeypatch, capsys, config_file, dispatcher, mail_transport):
        monkeypatch.setattr(main_module, "build_dispatcher", lambda settings: dispatcher)

        _run(monkeypatch, "-c", str(config_file), "--test-email")

        assert "Test email sent to investor@example.com" in capsys.readouterr().out
        assert len(mail_transport.sent) == 1
