"""Command-line interface for gitstream."""
