"""Travel and waiting time estimates for a single center."""

from __future__ import annotations

import logging
from typing import Protocol

from ..config import settings
from ..models.domain import TimeEstimate

logger = logging.getLogger(__name__)


class PatientCountSource(Protocol):
    def fetch_patient_count(self, site_id: int) -> int | None: ...


def travel_minutes(distance_km: float, speed_kmh: float, traffic_factor: float) -> float:
    """Fixed-speed travel time inflated by a traffic factor."""
    base_minutes = (distance_km / speed_kmh) * 60.0
    return base_minutes * traffic_factor


class TravelTimeEstimator:
    """Estimate travel and waiting minutes for a center at a known distance.

    Flagship centers get a fixed wait. Every other center costs one call to
    the waiting-time source; when that call yields nothing usable the default
    patient count is assumed so ranking never blocks on it.
    """

    def __init__(
        self,
        waiting_time_source: PatientCountSource,
        speed_kmh: float | None = None,
        traffic_factor: float | None = None,
        flagship_wait_minutes: float | None = None,
        minutes_per_patient: float | None = None,
        default_patient_count: int | None = None,
    ) -> None:
        self.waiting_time_source = waiting_time_source
        self.speed_kmh = speed_kmh if speed_kmh is not None else settings.travel_speed_kmh
        self.traffic_factor = traffic_factor if traffic_factor is not None else settings.traffic_factor
        self.flagship_wait_minutes = (
            flagship_wait_minutes if flagship_wait_minutes is not None else settings.flagship_wait_minutes
        )
        self.minutes_per_patient = (
            minutes_per_patient if minutes_per_patient is not None else settings.minutes_per_patient
        )
        self.default_patient_count = (
            default_patient_count if default_patient_count is not None else settings.default_patient_count
        )

    def patient_count(self, site_id: int) -> int:
        try:
            count = self.waiting_time_source.fetch_patient_count(site_id)
        except Exception:
            logger.exception(f"Waiting time lookup failed for siteId: {site_id}")
            count = None
        if count is None or count < 0:
            logger.warning(
                f"Using default patient count {self.default_patient_count} for siteId: {site_id}"
            )
            return self.default_patient_count
        return count

    def estimate(self, distance_km: float, is_flagship: bool, site_id: int) -> TimeEstimate:
        travel = travel_minutes(max(distance_km, 0.0), self.speed_kmh, self.traffic_factor)
        if is_flagship:
            wait = self.flagship_wait_minutes
        else:
            wait = self.patient_count(site_id) * self.minutes_per_patient
        return TimeEstimate(travel_minutes=travel, wait_minutes=wait)
