"""Transport adapters for the HTTP messenger client."""
