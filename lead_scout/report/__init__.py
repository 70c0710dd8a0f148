"""lead_scout.report: JSON and HTML renderers of a LeadProfile, used by the CLI."""

from lead_scout.report.html_report import render_html
from lead_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
