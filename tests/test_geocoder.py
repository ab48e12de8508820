import json

import httpx
import pytest

from nearest_centers.models.domain import Coordinate
from nearest_centers.services.geocoding import Geocoder, NominatimClient, iter_geocode_queries, parse_coordinates
from nearest_centers.services.geocoding.geocoder import extract_postal_code, tokenize_address
from nearest_centers.services.rate_limiter import RateLimiter


class FakeNominatim:
    """Returns canned results keyed by query; records every query it sees."""

    def __init__(self, results=None):
        self.results = results or {}
        self.queries: list[str] = []

    def search(self, query):
        self.queries.append(query)
        return self.results.get(query)


def test_extract_postal_code_and_tokenize():
    address = "12, MG Road, Bengaluru 560001"
    assert extract_postal_code(address) == "560001"
    assert tokenize_address(address, "560001") == ["12", "MG", "Road", "Bengaluru"]
    assert extract_postal_code("Flat 1234567, Indiranagar") is None


def test_short_address_tries_postal_code_first():
    queries = list(iter_geocode_queries("Koramangala, 560034"))
    assert queries == ["560034", "Koramangala 560034"]


def test_postal_code_only_address():
    assert list(iter_geocode_queries("560034")) == ["560034"]


def test_long_address_narrows_then_falls_back_to_postal_code():
    queries = list(iter_geocode_queries("12 MG Road, Bengaluru 560001"))
    assert queries == [
        "12 MG Road Bengaluru 560001",
        "MG Road Bengaluru 560001",
        "Road Bengaluru 560001",
        "Bengaluru 560001",
        "560001",
    ]


def test_address_without_postal_code_only_narrows():
    assert list(iter_geocode_queries("MG Road,  Bengaluru")) == ["MG Road Bengaluru", "Road Bengaluru", "Bengaluru"]


@pytest.mark.parametrize("address", ["", "   ", " , "])
def test_blank_address_yields_no_queries(address):
    assert list(iter_geocode_queries(address)) == []


def test_resolve_blank_address_makes_no_calls():
    client = FakeNominatim()
    assert Geocoder(client).resolve("   ") is None
    assert client.queries == []


def test_first_query_for_short_address_is_postal_code():
    client = FakeNominatim({"560034": {"lat": "12.93", "lon": "77.62"}})
    result = Geocoder(client).resolve("Koramangala 560034")

    assert client.queries == ["560034"]
    assert result == Coordinate(latitude=12.93, longitude=77.62)


def test_second_query_wins_when_first_fails():
    client = FakeNominatim(
        {
            "MG Road Bengaluru": {"lat": "12.9756", "lon": "77.6050"},
            "Road Bengaluru": {"lat": "1.0", "lon": "1.0"},
        }
    )
    result = Geocoder(client).resolve("Flat 4, MG Road Bengaluru")

    # "Flat 4 MG Road Bengaluru", "4 MG Road Bengaluru", then the match
    assert client.queries[-1] == "MG Road Bengaluru"
    assert len(client.queries) == 3
    assert result == Coordinate(latitude=12.9756, longitude=77.6050)


def test_full_query_failure_then_first_word_dropped():
    client = FakeNominatim({"Road Bengaluru": {"lat": "12.97", "lon": "77.59"}})
    result = Geocoder(client).resolve("MG Road Bengaluru")

    assert client.queries == ["MG Road Bengaluru", "Road Bengaluru"]
    assert result == Coordinate(latitude=12.97, longitude=77.59)


def test_malformed_coordinates_continue_to_next_query():
    client = FakeNominatim(
        {
            "MG Road Bengaluru": {"lat": "not-a-number", "lon": "77.59"},
            "Road Bengaluru": {"lat": "12.97", "lon": "77.59"},
        }
    )
    result = Geocoder(client).resolve("MG Road Bengaluru")

    assert result == Coordinate(latitude=12.97, longitude=77.59)
    assert len(client.queries) == 2


def test_exhausted_queries_return_none():
    client = FakeNominatim()
    assert Geocoder(client).resolve("Nowhere Lane, Atlantis 999999") is None
    assert client.queries[-1] == "999999"


@pytest.mark.parametrize(
    "result",
    [
        None,
        {},
        {"lat": "12.0"},
        {"lat": None, "lon": "77.0"},
        {"lat": "nan", "lon": "77.0"},
        {"lat": "95.0", "lon": "77.0"},
        {"lat": [], "lon": "77.0"},
    ],
)
def test_parse_coordinates_rejects_unusable_results(result):
    assert parse_coordinates(result) is None


def test_parse_coordinates_accepts_numeric_strings():
    assert parse_coordinates({"lat": "12.5", "lon": "-77.25"}) == Coordinate(latitude=12.5, longitude=-77.25)


def _nominatim(handler, sleeps=None):
    limiter = RateLimiter(cooldown_seconds=1.0, sleep=(sleeps.append if sleeps is not None else lambda _: None))
    return NominatimClient(
        base_url="https://geo.test/",
        country_codes="in",
        rate_limiter=limiter,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_nominatim_client_sends_sanitized_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"lat": "12.97", "lon": "77.59"}, {"lat": "0", "lon": "0"}])

    sleeps: list[float] = []
    result = _nominatim(handler, sleeps).search("#12 MG Road & Church St")

    assert result == {"lat": "12.97", "lon": "77.59"}
    assert seen["path"] == "/search"
    assert seen["params"]["q"] == "12 MG Road  Church St"
    assert seen["params"]["format"] == "json"
    assert seen["params"]["limit"] == "1"
    assert seen["params"]["countrycodes"] == "in"
    assert sleeps == [1.0]


@pytest.mark.parametrize(
    ("status_code", "body"),
    [
        (500, {"text": "server error"}),
        (200, {"text": "<html>not json</html>"}),
        (200, {"json": []}),
        (200, {"json": {"error": "unexpected"}}),
    ],
)
def test_nominatim_client_treats_failures_as_no_match(status_code, body):
    client = _nominatim(lambda request: httpx.Response(status_code, **body))
    assert client.search("Bengaluru") is None


def test_nominatim_client_handles_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    sleeps: list[float] = []
    assert _nominatim(handler, sleeps).search("Bengaluru") is None
    assert sleeps == [1.0]


def test_geocoder_with_http_client_end_to_end():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["q"] == "Road Bengaluru":
            return httpx.Response(200, content=json.dumps([{"lat": "12.97", "lon": "77.59"}]))
        return httpx.Response(200, json=[])

    geocoder = Geocoder(_nominatim(handler))
    assert geocoder.resolve("MG Road Bengaluru") == Coordinate(latitude=12.97, longitude=77.59)
