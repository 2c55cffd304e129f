"""Fetchers and caches for publications, citation metrics and updates."""
