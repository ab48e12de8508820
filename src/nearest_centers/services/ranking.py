"""Rank catalog centers by distance and by total time-to-service."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..models.domain import Center, Coordinate, RankedCenter, RankingResult
from .estimation import TravelTimeEstimator
from .geospatial import distance_km

logger = logging.getLogger(__name__)


def centers_within_radius(
    origin: Coordinate,
    centers: Iterable[Center],
    radius_km: float,
) -> list[tuple[Center, float]]:
    """Pair each located center with its distance, keeping those inside the radius.

    Catalog order is preserved; centers without coordinates are skipped.
    """
    nearby: list[tuple[Center, float]] = []
    for center in centers:
        if center.coordinates is None:
            continue
        distance = distance_km(origin, center.coordinates)
        if distance <= radius_km:
            nearby.append((center, distance))
    return nearby


def estimate_centers(
    nearby: Sequence[tuple[Center, float]],
    estimator: TravelTimeEstimator,
) -> list[RankedCenter]:
    """Attach time estimates one center at a time."""
    ranked: list[RankedCenter] = []
    for center, distance in nearby:
        estimate = estimator.estimate(distance, center.is_flagship, center.site_id)
        ranked.append(
            RankedCenter(
                center=center,
                distance_km=distance,
                travel_minutes=estimate.travel_minutes,
                wait_minutes=estimate.wait_minutes,
            )
        )
    return ranked


def rank_centers(
    origin: Coordinate,
    centers: Iterable[Center],
    estimator: TravelTimeEstimator,
    radius_km: float = 15.0,
    limit: int = 2,
) -> RankingResult:
    nearby = centers_within_radius(origin, centers, radius_km)
    if not nearby:
        logger.info(f"No centers found within {radius_km} km of ({origin.latitude}, {origin.longitude})")
        return RankingResult(by_distance=[], by_time=[])

    ranked = estimate_centers(nearby, estimator)

    # sorted() is stable, so ties keep catalog order.
    by_distance = sorted(ranked, key=lambda item: item.distance_km)[:limit]
    by_time = sorted(ranked, key=lambda item: item.total_minutes)[:limit]
    return RankingResult(by_distance=by_distance, by_time=by_time)
