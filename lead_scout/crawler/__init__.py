"""Fetching, link discovery and the site crawler."""
