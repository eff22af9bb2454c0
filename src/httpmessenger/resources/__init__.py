"""Bundled default configuration files."""
