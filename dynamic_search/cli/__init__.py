"""Command-line interface for dynamic-search."""
