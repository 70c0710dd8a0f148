"""External enrichment: technology profile and company record lookups."""
