import math

import pytest

from nearest_centers.models.domain import Center, Coordinate
from nearest_centers.services.estimation import TravelTimeEstimator
from nearest_centers.services.geospatial import EARTH_RADIUS_KM
from nearest_centers.services.ranking import centers_within_radius, rank_centers

ORIGIN = Coordinate(latitude=12.9716, longitude=77.5946)
KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180


def _north_of_origin(km: float) -> Coordinate:
    return Coordinate(latitude=ORIGIN.latitude + km / KM_PER_DEGREE, longitude=ORIGIN.longitude)


def _center(site_id: int, name: str, km: float | None, flagship: bool = False) -> Center:
    return Center(
        site_id=site_id,
        name=name,
        address=f"{name} address",
        coordinates=_north_of_origin(km) if km is not None else None,
        is_flagship=flagship,
    )


class FakeWaitingSource:
    def __init__(self, counts=None):
        self.counts = counts or {}
        self.calls: list[int] = []

    def fetch_patient_count(self, site_id):
        self.calls.append(site_id)
        return self.counts.get(site_id)


def test_worked_example_ranks_distance_and_time_independently():
    centers = [
        _center(1, "A", 10.0, flagship=True),
        _center(2, "B", 8.0),
        _center(3, "C", 20.0, flagship=True),
    ]
    source = FakeWaitingSource(counts={2: 2})

    result = rank_centers(ORIGIN, centers, TravelTimeEstimator(source), radius_km=15.0, limit=2)

    assert [item.center.name for item in result.by_distance] == ["B", "A"]
    assert [item.center.name for item in result.by_time] == ["A", "B"]
    a, b = result.by_time
    assert a.total_minutes == pytest.approx(39.0 + 10.0)
    assert b.total_minutes == pytest.approx(31.2 + 120.0)
    assert source.calls == [2]


def test_centers_without_coordinates_or_out_of_range_are_excluded():
    centers = [
        _center(1, "Unmapped", None),
        _center(2, "Far", 15.5),
        _center(3, "Edge", 14.99),
    ]
    nearby = centers_within_radius(ORIGIN, centers, radius_km=15.0)

    assert [center.name for center, _ in nearby] == ["Edge"]
    assert nearby[0][1] == pytest.approx(14.99)


def test_out_of_range_centers_never_reach_the_waiting_source():
    source = FakeWaitingSource()
    rank_centers(ORIGIN, [_center(1, "Far", 30.0), _center(2, "Near", 1.0)], TravelTimeEstimator(source))

    assert source.calls == [2]


def test_empty_ranking_when_nothing_in_range():
    result = rank_centers(ORIGIN, [_center(1, "Far", 40.0)], TravelTimeEstimator(FakeWaitingSource()))

    assert result.is_empty
    assert result.by_distance == []
    assert result.by_time == []


def test_lists_are_truncated_and_sorted():
    centers = [_center(i, f"S{i}", km, flagship=True) for i, km in enumerate([5.0, 1.0, 3.0, 2.0, 4.0], start=1)]
    result = rank_centers(ORIGIN, centers, TravelTimeEstimator(FakeWaitingSource()), limit=2)

    assert [item.center.name for item in result.by_distance] == ["S2", "S4"]
    assert [item.center.name for item in result.by_time] == ["S2", "S4"]
    distances = [item.distance_km for item in result.by_distance]
    assert distances == sorted(distances)


def test_ties_keep_catalog_order():
    centers = [_center(1, "First", 2.0, flagship=True), _center(2, "Second", 2.0, flagship=True)]
    result = rank_centers(ORIGIN, centers, TravelTimeEstimator(FakeWaitingSource()))

    assert [item.center.name for item in result.by_distance] == ["First", "Second"]
    assert [item.center.name for item in result.by_time] == ["First", "Second"]


def test_radius_and_limit_are_parameters():
    centers = [_center(1, "A", 1.0, flagship=True), _center(2, "B", 18.0, flagship=True), _center(3, "C", 19.0, flagship=True)]
    result = rank_centers(ORIGIN, centers, TravelTimeEstimator(FakeWaitingSource()), radius_km=20.0, limit=3)

    assert [item.center.name for item in result.by_distance] == ["A", "B", "C"]


def test_ranked_values_are_never_negative():
    centers = [_center(1, "Here", 0.0), _center(2, "Near", 2.5, flagship=True)]
    result = rank_centers(ORIGIN, centers, TravelTimeEstimator(FakeWaitingSource(counts={1: 0})))

    for item in result.by_distance + result.by_time:
        assert item.distance_km >= 0
        assert item.travel_minutes >= 0
        assert item.wait_minutes >= 0
