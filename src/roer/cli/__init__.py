"""Command-line interface for roer."""
