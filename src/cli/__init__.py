"""Command-line layer (Typer + Rich)."""

__version__ = "1.0"
