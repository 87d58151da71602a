"""Command-line interface for gh-info."""
