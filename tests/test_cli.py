"""CLI tests (``lead_scout/cli.py``) through click.testing.CliRunner.
Inspection and crawl are patched, nothing touches the network.
"""
import importlib
import json

import pytest
from click.testing import CliRunner

from lead_scout.aggregator import LeadProfile
from lead_scout.cli import cli
from lead_scout.crawler.models import CrawlResult
from lead_scout.logger import configure

# the package re-exports the click group under the same name as the module
cli_module = importlib.import_module("lead_scout.cli")


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run without any configs/default.yaml and without environment overrides."""
    monkeypatch.chdir(tmp_path)
    for var in ("REQUEST_TIMEOUT_MS", "MAX_EXTRA_LINKS", "DEBUG_FETCH", "BUILTWITH_API_KEY",
                "CNPJBIZ_BASE_URL", "CNPJBIZ_API_KEY", "ACTION_API_KEY", "PORT"):
        monkeypatch.delenv(var, raising=False)
    yield
    # CliRunner streams are closed after each invoke
    configure()


@pytest.fixture(autouse=True)
def patch_engine(monkeypatch):
    """Fake inspection/crawl results and record the configs they received."""
    calls = []

    async def fake_inspect(domain, cfg):
        calls.append((domain, cfg))
        return LeadProfile(domain=domain, url=f"https://{domain}", cnpj="11.222.333/0001-81")

    async def fake_crawl(domain, cfg):
        calls.append((domain, cfg))
        return CrawlResult(base_url=f"https://{domain}", crawled_successfully=True, emails=["a@b.com"])

    monkeypatch.setattr(cli_module, "inspect_domain", fake_inspect)
    monkeypatch.setattr(cli_module, "crawl_domain", fake_crawl)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "LeadScout" in result.output


def test_inspect_stdout(patch_engine):
    result = CliRunner().invoke(cli, ["inspect", "https://www.Loja.com.br/"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["domain"] == "loja.com.br"
    assert data["cnpj"] == "11.222.333/0001-81"
    assert patch_engine[0][0] == "loja.com.br"


def test_inspect_writes_reports(tmp_path):
    json_path = tmp_path / "out" / "lead.json"
    html_path = tmp_path / "out" / "lead.html"
    result = CliRunner().invoke(
        cli, ["inspect", "loja.com.br", "--json", str(json_path), "--html", str(html_path)]
    )
    assert result.exit_code == 0, result.output
    assert "JSON report" in result.output
    assert "HTML report" in result.output
    assert json.loads(json_path.read_text(encoding="utf-8"))["url"] == "https://loja.com.br"
    assert "11.222.333/0001-81" in html_path.read_text(encoding="utf-8")


def test_inspect_empty_domain():
    result = CliRunner().invoke(cli, ["inspect", "  "])
    assert result.exit_code == 1


def test_inspect_failure_is_reported(monkeypatch):
    async def boom(domain, cfg):
        raise RuntimeError("kaput")

    monkeypatch.setattr(cli_module, "inspect_domain", boom)
    result = CliRunner().invoke(cli, ["inspect", "loja.com.br"])
    assert result.exit_code == 1
    assert "kaput" in result.output


def test_crawl_command():
    result = CliRunner().invoke(cli, ["crawl", "loja.com.br", "--pretty"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["crawled_successfully"] is True
    assert data["emails"] == ["a@b.com"]


def test_global_overrides_reach_the_config(patch_engine):
    result = CliRunner().invoke(cli, ["--timeout", "3", "--debug-fetch", "crawl", "loja.com.br"])
    assert result.exit_code == 0, result.output
    cfg = patch_engine[0][1]
    assert cfg.timeout == 3
    assert cfg.debug_fetch is True


def test_show_config_masks_secrets(tmp_path):
    cfg_file = tmp_path / "lead.yaml"
    cfg_file.write_text("max_extra_links: 7\nbuiltwith:\n  api_key: s3cr3t\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["max_extra_links"] == 7
    assert data["builtwith"]["api_key"] == "***"
    assert "s3cr3t" not in result.output


def test_bad_config_exits(tmp_path):
    cfg_file = tmp_path / "lead.yaml"
    cfg_file.write_text("timeout: -5\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_serve_passes_host_and_port(monkeypatch):
    seen = {}

    def fake_run(cfg, host=None, port=None):
        seen.update(host=host, port=port)

    monkeypatch.setattr(cli_module, "run_server", fake_run)
    result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1", "--port", "8081"])
    assert result.exit_code == 0, result.output
    assert seen == {"host": "127.0.0.1", "port": 8081}


@pytest.mark.parametrize("value", ["0", "-2"])
def test_timeout_override_is_validated(patch_engine, value):
    result = CliRunner().invoke(cli, ["--timeout", value, "crawl", "loja.com.br"])
    assert result.exit_code == 1
    assert patch_engine == []
