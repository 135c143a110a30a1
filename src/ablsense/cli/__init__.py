"""Command-line interface for ablsense."""
