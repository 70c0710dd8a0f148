"""HTML to plain text for entity scanning.

Script, style, noscript and template content is dropped; the remaining text
nodes are joined with single spaces so that numbers split across inline tags
(``<b>(11)</b> 4002-8922``) still read as one token sequence.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

from bs4 import BeautifulSoup

__all__: Sequence[str] = ("html_to_text",)

_WS_RE = re.compile(r"\s+")
_INVISIBLE = ["script", "style", "noscript", "template"]


def html_to_text(html: str) -> str:
    """Visible text of *html* with whitespace collapsed."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(_INVISIBLE):
        element.decompose()
    return _WS_RE.sub(" ", " ".join(soup.stripped_strings)).strip()
