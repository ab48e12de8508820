"""Domain models for service centers and ranking results."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Center:
    """Represents a service center from the catalog."""

    site_id: int
    name: Optional[str]
    address: Optional[str]
    coordinates: Optional[Coordinate]
    is_flagship: bool = False


@dataclass(frozen=True, slots=True)
class TimeEstimate:
    travel_minutes: float
    wait_minutes: float

    @property
    def total_minutes(self) -> float:
        return self.travel_minutes + self.wait_minutes


@dataclass(frozen=True, slots=True)
class RankedCenter:
    """A center paired with its distance and time estimate for one request."""

    center: Center
    distance_km: float
    travel_minutes: float
    wait_minutes: float

    @property
    def total_minutes(self) -> float:
        return self.travel_minutes + self.wait_minutes


@dataclass(slots=True)
class RankingResult:
    by_distance: list[RankedCenter]
    by_time: list[RankedCenter]

    @property
    def is_empty(self) -> bool:
        return not self.by_distance and not self.by_time
