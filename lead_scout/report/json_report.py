# lead_scout/report/json_report.py
"""
JSON report of a LeadProfile.
"""
import json
from pathlib import Path

from lead_scout.aggregator import LeadProfile


def render_json(profile: LeadProfile, output_path: Path | str) -> Path:
    """
    Save *profile* as indented UTF-8 JSON at *output_path* and return the path.

    ```python
    from lead_scout.report.json_report import render_json
    path = render_json(profile, "reports/loja.com.br.json")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", encoding="utf-8") as f:
        json.dump(profile.to_dict(), f, ensure_ascii=False, indent=2)

    return output
