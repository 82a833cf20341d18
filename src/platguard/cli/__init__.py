"""Command-line interface for platguard."""
