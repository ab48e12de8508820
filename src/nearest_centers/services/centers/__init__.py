"""Nearest-center lookup service."""

from .service import find_nearest_centers, format_ranking

__all__ = ["find_nearest_centers", "format_ranking"]
