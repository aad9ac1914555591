"""Rank source files by structural importance in their dependency graph."""

__version__ = "0.1.0"
