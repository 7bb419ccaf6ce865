"""Command-line entry points for adaptquiz."""

from .main import main

__all__ = ["main"]
