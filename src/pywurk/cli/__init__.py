"""Command line interface."""

from pywurk.cli.app import app, main

__all__ = ["app", "main"]
