"""lead_scout.report.html_report: HTML rendering of a LeadProfile with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from lead_scout.aggregator import LeadProfile

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    profile: LeadProfile,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Render *profile* through ``report.html.j2`` and save it to *output_path*.

    Args:
        profile: the inspected lead.
        output_path: target HTML file; parent directories are created.
        template_dir: directory holding ``report.html.j2``; the bundled template by default.

    Returns:
        Path of the written file.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "html.j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {"profile": profile.to_dict()}
    output.write_text(template.render(**context), encoding="utf-8")
    return output
