"""Choosing the merchant's own CNPJ among several candidates.

Checkout widgets, payment processors and shipping partners often print their
own CNPJ on a store's pages. The merchant's number is the one surrounded by
company-identification language (``razão social``, ``endereço``, footer
markup...), so every candidate is scored by the keywords found in a window of
markup around its first occurrence.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import List, Optional

from lead_scout.config import ScoringConfig
from lead_scout.parser.entities import digits_only, format_cnpj
from lead_scout.utils import unique

__all__: Sequence[str] = ("score_candidate", "choose_best_cnpj")

FOOTER_MARKER = "footer"


def _locate(markup: str, variant: str) -> int:
    idx = markup.find(variant)
    if idx < 0:
        digits = digits_only(variant)
        if len(digits) >= 10:
            idx = markup.find(digits)
    return idx


def score_candidate(markup: str, candidate: str, scoring: Optional[ScoringConfig] = None) -> int:
    """Context score of *candidate* (14 digits) inside *markup*.

    *markup* is expected lower-cased already; :func:`choose_best_cnpj` does that once.
    """
    scoring = scoring or ScoringConfig()
    variants = [v.lower() for v in unique([candidate, format_cnpj(candidate)])]

    score = 0
    for variant in variants:
        idx = _locate(markup, variant)
        if idx < 0:
            continue
        window = markup[max(0, idx - scoring.window): min(len(markup), idx + scoring.window)]
        score += scoring.keyword_points * sum(1 for keyword in scoring.keywords if keyword in window)
        if FOOTER_MARKER in window:
            score += scoring.footer_bonus
    return score


def choose_best_cnpj(
    markup: str,
    candidates: List[str],
    scoring: Optional[ScoringConfig] = None,
) -> Optional[str]:
    """Highest-scoring candidate; earlier candidates win ties."""
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    lowered = (markup or "").lower()
    # sorted() is stable, so equal scores keep candidate order
    ranked = sorted(candidates, key=lambda c: score_candidate(lowered, c, scoring), reverse=True)
    return ranked[0]
