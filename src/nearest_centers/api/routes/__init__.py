"""Route group exports."""

from . import centers, health

__all__ = ["centers", "health"]
