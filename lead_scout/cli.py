#!/usr/bin/env python3
"""
Command line entry point of LeadScout.

Commands:
  inspect DOMAIN   Full lead profile (crawl + BuiltWith + company record)
  crawl DOMAIN     Site crawl only (emails, phones, CNPJ candidates)
  config           Show the effective configuration (secrets masked)
  serve            Run the HTTP API

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string
  --timeout SEC       Per-request timeout override
  --debug-fetch       Log every fetch outcome

Example:
  lead-scout inspect loja.com.br --json reports/loja.json --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from lead_scout import __version__
from lead_scout.config import ScoutConfig, load_config
from lead_scout.crawler.crawler import crawl_domain
from lead_scout.engine import inspect_domain
from lead_scout.logger import DEFAULT_FORMAT, init_logging
from lead_scout.report.html_report import render_html
from lead_scout.report.json_report import render_json
from lead_scout.server import run as run_server
from lead_scout.utils import normalize_domain

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
_SECRET_FIELDS = ("api_key",)


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


def _mask_secrets(data):
    if isinstance(data, dict):
        return {
            k: ("***" if k in _SECRET_FIELDS and v else _mask_secrets(v)) for k, v in data.items()
        }
    return data


def _domain_or_fail(value: str) -> str:
    domain = normalize_domain(value)
    if not domain:
        print_error("Domain is required, e.g. 'example.com.br'")
    return domain


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="LeadScout, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML/JSON configuration file.",
)
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file (stdout when omitted)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Logging format string",
)
@click.option("--timeout", "timeout", type=float, default=None, help="Per-request timeout (seconds)")
@click.option("--debug-fetch", is_flag=True, help="Log status, URL and length of every fetch")
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format, timeout, debug_fetch):
    """LeadScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
    overrides = {}
    if timeout is not None:
        overrides["timeout"] = timeout
    if debug_fetch:
        overrides["debug_fetch"] = True
    if overrides:
        try:
            cfg = ScoutConfig.model_validate({**cfg.model_dump(), **overrides})
        except ValidationError as e:
            print_error(f"Invalid option: {e}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("inspect", context_settings=CONTEXT_SETTINGS)
@click.argument("domain")
@click.option(
    "--json", "-j", "json_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Save the JSON report to a file",
)
@click.option(
    "--html", "-h", "html_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Save the HTML report to a file",
)
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def inspect_lead(ctx, domain, json_output, html_output, pretty):
    """Inspect DOMAIN and print or save its lead profile."""
    cfg = ctx.obj["config"]
    domain = _domain_or_fail(domain)
    try:
        profile = asyncio.run(inspect_domain(domain, cfg))
    except Exception as e:
        print_error(f"Inspection failed: {e}")

    if not json_output and not html_output:
        click.echo(profile.json(pretty=pretty))
        return

    if json_output:
        try:
            click.echo(f"JSON report: {render_json(profile, json_output)}")
        except OSError as e:
            print_error(f"Failed to save JSON: {e}")

    if html_output:
        try:
            click.echo(f"HTML report: {render_html(profile, html_output)}")
        except OSError as e:
            print_error(f"Failed to save HTML: {e}")


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.argument("domain")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def crawl(ctx, domain, pretty):
    """Crawl DOMAIN and print the entities found."""
    cfg = ctx.obj["config"]
    domain = _domain_or_fail(domain)
    result = asyncio.run(crawl_domain(domain, cfg))
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if pretty else None))


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj["config"]
    click.echo(json.dumps(_mask_secrets(cfg.model_dump(mode="json")), ensure_ascii=False, indent=2))


@cli.command("serve", context_settings=CONTEXT_SETTINGS)
@click.option("--host", default=None, help="Bind address (config 'host' by default)")
@click.option("--port", type=int, default=None, help="Port (config 'port' / $PORT by default)")
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP API."""
    run_server(ctx.obj["config"], host=host, port=port)


if __name__ == "__main__":
    cli()
