"""Command-line interface for note_match."""

# Import CLI entry point for easier access
from .main import main as cli_main

__all__ = ["cli_main"]
