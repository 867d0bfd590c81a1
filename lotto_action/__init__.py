"""Scheduled lotto ticket purchasing and result checking backed by GitHub issues."""

__version__ = "1.2.0"
