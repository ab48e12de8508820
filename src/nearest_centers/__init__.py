"""Nearest service center lookup API."""

__version__ = "0.1.0"
