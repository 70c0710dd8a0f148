"""Regex extractors for contact entities and CNPJ candidates.

All functions are pure (text in, list of strings out) and independent of the
crawler, so they can be applied to any markup or plain text.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import List, Optional

from lead_scout.utils import unique

__all__: Sequence[str] = (
    "digits_only",
    "extract_emails",
    "normalize_phone",
    "extract_phones",
    "extract_cnpjs",
    "format_cnpj",
)

_EMAIL_RE = re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE)

_TEL_LINK_RE = re.compile(r"tel:\+?[0-9()+\-\s.]{8,}", re.IGNORECASE)
_WA_ME_RE = re.compile(r"wa\.me/(\d{8,15})", re.IGNORECASE)
_WA_API_RE = re.compile(r"api\.whatsapp\.com/send\?phone=(\d{8,15})", re.IGNORECASE)
_BR_PHONE_RE = re.compile(r"(?:\+?55\s?)?(?:\(?\d{2}\)?\s?)?\d{4,5}[\s.\-]?\d{4}")
_TOLL_FREE_RE = re.compile(r"\b0800[\s.\-]?\d{3}[\s.\-]?\d{4}\b")

_CNPJ_RE = re.compile(r"\b\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}\b")

_NON_DIGIT_RE = re.compile(r"\D")
_NON_PHONE_RE = re.compile(r"[^\d+]")
_WS_RE = re.compile(r"\s+")

TOLL_FREE_PREFIX = "0800"
COUNTRY_CODE = "55"


def digits_only(value: Optional[str]) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


def extract_emails(text: str) -> List[str]:
    """Lower-cased, de-duplicated ``local@domain.tld`` matches."""
    return unique(match.lower() for match in _EMAIL_RE.findall(text or ""))


def normalize_phone(raw: str) -> Optional[str]:
    """
    Canonical form of a raw phone match, or ``None`` when it is too short.

    * ``0800`` numbers stay digits-only;
    * 10-11 digits are national numbers and gain ``+55``;
    * 12-13 digits already carry a country code and gain ``+``;
    * anything already ``+``-prefixed passes through stripped.
    """
    stripped = _NON_PHONE_RE.sub("", raw)
    digits = digits_only(stripped)
    if digits.startswith(TOLL_FREE_PREFIX):
        return digits
    if len(digits) < 8:
        return None
    if len(digits) in (10, 11):
        return f"+{COUNTRY_CODE}{digits}"
    if len(digits) in (12, 13):
        return f"+{digits}"
    if stripped.startswith("+"):
        return stripped
    return digits


def extract_phones(text: str) -> List[str]:
    """Phones from ``tel:`` links, WhatsApp links, written Brazilian numbers and 0800 numbers."""
    flat = _WS_RE.sub(" ", text or "")

    raw: List[str] = [m.group(0)[len("tel:"):].strip() for m in _TEL_LINK_RE.finditer(flat)]
    raw += ["+" + digits for digits in _WA_ME_RE.findall(flat)]
    raw += ["+" + digits for digits in _WA_API_RE.findall(flat)]
    raw += [m.group(0) for m in _BR_PHONE_RE.finditer(flat)]
    raw += [m.group(0) for m in _TOLL_FREE_RE.finditer(flat)]

    return unique(normalize_phone(item.strip()) for item in unique(raw))


def extract_cnpjs(text: str) -> List[str]:
    """14-digit CNPJ candidates, punctuated or not, in first-seen order."""
    digits = (digits_only(m.group(0)) for m in _CNPJ_RE.finditer(text or ""))
    return unique(d for d in digits if len(d) == 14)


def format_cnpj(value: Optional[str]) -> Optional[str]:
    """``NN.NNN.NNN/NNNN-NN`` for a 14-digit value, ``None`` for anything else."""
    d = digits_only(value)
    if len(d) != 14:
        return None
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"
