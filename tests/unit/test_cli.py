"""
Tests for the operator CLI against a temporary SQLite store.
"""

import json

import pytest

from src.app_shell.cli import main
from tests.conftest import ROOT

DEMO_FIXTURE = str(ROOT / "fixtures" / "demo.json")


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SEO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SEO_RULES_PATH", str(ROOT / "rules.yaml"))
    monkeypatch.setenv("SEO_CONTENT_STORE", "sqlite")
    monkeypatch.delenv("SEO_SYSTEM_DOMAINS", raising=False)
    return tmp_path / "data"


@pytest.fixture
def seeded_cli(cli_env, capsys):
    assert main(["seed", DEMO_FIXTURE]) == 0
    capsys.readouterr()
    return cli_env


class TestMigrateAndSeed:
    """Local store setup commands."""

    def test_migrate_creates_database(self, cli_env, capsys):
        assert main(["migrate"]) == 0
        assert (cli_env / "content.db").exists()
        assert "Applied 1 migrations" in capsys.readouterr().out

    def test_migrate_twice_applies_nothing(self, cli_env, capsys):
        main(["migrate"])
        assert main(["migrate"]) == 0
        assert "Applied 0 migrations" in capsys.readouterr().out

    def test_seed_reports_rows(self, cli_env, capsys):
        assert main(["seed", DEMO_FIXTURE]) == 0
        assert "Seeded" in capsys.readouterr().out

    def test_seed_missing_file(self, cli_env, tmp_path):
        assert main(["seed", str(tmp_path / "nope.json")]) == 1

    def test_seed_invalid_json(self, cli_env, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        assert main(["seed", str(bad)]) == 1

    def test_seed_rejects_non_object(self, cli_env, tmp_path):
        listing = tmp_path / "list.json"
        listing.write_text("[]")
        assert main(["seed", str(listing)]) == 1


class TestResolve:
    """The resolve command prints the record as JSON."""

    def test_resolve_homepage(self, seeded_cli, capsys):
        assert main(["resolve", "shop.acme-demo.com"]) == 0
        record = json.loads(capsys.readouterr().out)
        assert record["title"] == "Acme Outfitters | Outdoor Gear"
        assert record["source"] == "homepage_page|website:web-acme|page:page-home"
        assert record["keywords"] == ["outdoor", "camping", "hiking"]

    def test_resolve_unknown_domain(self, seeded_cli, capsys):
        assert main(["resolve", "unknown.example.org", "/x"]) == 1
        assert capsys.readouterr().out == ""

    def test_missing_rules_file_exits(self, cli_env, monkeypatch, tmp_path):
        monkeypatch.setenv("SEO_RULES_PATH", str(tmp_path / "missing.yaml"))
        with pytest.raises(SystemExit) as excinfo:
            main(["resolve", "shop.acme-demo.com"])
        assert excinfo.value.code == 1


class TestRender:
    """The render command prints the edge response."""

    def test_render_crawler_document(self, seeded_cli, capsys):
        assert main(["render", "shop.acme-demo.com", "/about"]) == 0
        out = capsys.readouterr().out
        assert "<title>About Us - Acme Outfitters</title>" in out
        assert "og:image" in out

    def test_render_with_headers(self, seeded_cli, capsys):
        assert main(["render", "shop.acme-demo.com", "/about", "--headers"]) == 0
        out = capsys.readouterr().out
        assert "X-SEO-Source: website_page|website:web-acme|page:page-about" in out
        assert "Cache-Control: public, max-age=300, s-maxage=300" in out

    def test_render_unknown_domain_uses_minimal_record(self, seeded_cli, capsys):
        assert main(["render", "unknown.example.org", "/", "--headers"]) == 0
        out = capsys.readouterr().out
        assert "X-SEO-Source: fallback_no_data" in out


class TestServe:
    """The serve command hands the app to uvicorn."""

    def test_serve_runs_uvicorn(self, cli_env, monkeypatch):
        import uvicorn

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
        assert main(["serve", "--port", "9000"]) == 0
        assert calls == [("src.api.main:app", {"host": "127.0.0.1", "port": 9000})]
