"""Nearest-center lookup: geocode, load the catalog, rank, and format."""

from __future__ import annotations

import logging
from typing import Any

from ...config import settings
from ...data.centers_repository import list_centers
from ...models.domain import RankedCenter, RankingResult
from ...schemas.centers import CenterDistanceModel, CenterTimeModel, NearestCentersResponse
from ..estimation import TravelTimeEstimator
from ..geocoding import Geocoder
from ..ranking import rank_centers
from ..waiting_time import WaitingTimeClient

logger = logging.getLogger(__name__)

ADDRESS_REQUIRED = "Address is required"
GEOCODE_FAILED = "Could not geocode the provided address"
NO_CENTERS_AVAILABLE = "No valid centers available"


def _hours(minutes: float) -> float:
    return round(minutes / 60.0, 2)


def _distance_view(item: RankedCenter) -> CenterDistanceModel:
    return CenterDistanceModel(
        name=item.center.name,
        address=item.center.address,
        distance_km=round(item.distance_km, 2),
    )


def _time_view(item: RankedCenter) -> CenterTimeModel:
    return CenterTimeModel(
        name=item.center.name,
        address=item.center.address,
        distance_km=round(item.distance_km, 2),
        travel_time_hrs=_hours(item.travel_minutes),
        waiting_time_hrs=_hours(item.wait_minutes),
        total_time_hrs=_hours(item.total_minutes),
    )


def format_ranking(ranking: RankingResult) -> NearestCentersResponse:
    return NearestCentersResponse(
        centers_distance=[_distance_view(item) for item in ranking.by_distance],
        centers_time=[_time_view(item) for item in ranking.by_time],
    )


def find_nearest_centers(address: str | None) -> dict[str, Any]:
    """Return the closest and the quickest centers for ``address``.

    Every outcome is a JSON-ready dict: the ranked lists on success, otherwise
    an object carrying ``error`` or ``message``.
    """
    if not address or not address.strip():
        return {"error": ADDRESS_REQUIRED}

    try:
        origin = Geocoder().resolve(address)
        if origin is None:
            return {"error": GEOCODE_FAILED}

        centers = list_centers()
        if not centers:
            return {"error": NO_CENTERS_AVAILABLE}

        estimator = TravelTimeEstimator(WaitingTimeClient())
        ranking = rank_centers(
            origin,
            centers,
            estimator,
            radius_km=settings.search_radius_km,
            limit=settings.max_results,
        )
        if ranking.is_empty:
            return {"message": f"No centers found within {settings.search_radius_km:g} km"}

        return format_ranking(ranking).model_dump(by_alias=True)
    except Exception as exc:
        logger.exception(f"Error finding nearest centers: {exc}")
        return {"error": f"An error occurred: {exc}"}
