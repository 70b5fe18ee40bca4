"""Commit validation pipeline for pushes into managed repositories."""

__version__ = "0.1.0"
