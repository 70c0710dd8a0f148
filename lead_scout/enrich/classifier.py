"""Keyword rules turning technology names into a platform and marketing tools."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

# (keyword, display name); the first matching platform wins
PLATFORM_RULES: Tuple[Tuple[str, str], ...] = (
    ("bagy", "Bagy"),
    ("shopify", "Shopify"),
    ("woocommerce", "WooCommerce"),
    ("vtex", "VTEX"),
    ("magento", "Magento"),
    ("bigcommerce", "BigCommerce"),
    ("prestashop", "PrestaShop"),
    ("opencart", "OpenCart"),
    ("nuvemshop", "Nuvemshop"),
    ("loja integrada", "Loja Integrada"),
    ("tray", "Tray"),
    ("wake", "Wake"),
)

MARKETING_RULES: Tuple[Tuple[str, str], ...] = (
    ("klaviyo", "Klaviyo"),
    ("rd station", "RD Station"),
    ("hubspot", "HubSpot"),
    ("mailchimp", "Mailchimp"),
    ("activecampaign", "ActiveCampaign"),
    ("sendinblue", "Brevo (Sendinblue)"),
    ("marketo", "Adobe Marketo"),
)


@dataclass(slots=True)
class Classification:
    ecommerce_platform: Optional[str] = None
    marketing_automation_tools: List[str] = field(default_factory=list)


def classify_technologies(tech: Iterable[str]) -> Classification:
    names = [t.lower() for t in tech if t]

    def matches(keyword: str) -> bool:
        return any(keyword in name for name in names)

    platform = next((name for key, name in PLATFORM_RULES if matches(key)), None)
    tools = [name for key, name in MARKETING_RULES if matches(key)]
    return Classification(ecommerce_platform=platform, marketing_automation_tools=tools)
