"""Command-line interface for TechMatrix."""
