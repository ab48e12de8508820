"""Waiting-time source integration."""

from .client import WaitingTimeClient

__all__ = ["WaitingTimeClient"]
