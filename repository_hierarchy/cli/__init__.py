"""Command-line interface for Repository Hierarchy."""
