"""Command line interface for appmods."""

from .cli import main

__all__ = ["main"]
