"""Offline extraction of language server configuration modules into a JSON report."""

__version__ = "0.1.0"
