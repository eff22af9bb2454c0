"""Ports for the HTTP messenger client."""
