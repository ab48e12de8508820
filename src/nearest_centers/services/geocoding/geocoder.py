"""Free-text address resolution by progressive query narrowing."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterator, Mapping, Optional

from ...models.domain import Coordinate
from .nominatim_client import NominatimClient

logger = logging.getLogger(__name__)

POSTAL_CODE_PATTERN = re.compile(r"\b\d{6}\b")
_WORD_SEPARATOR = re.compile(r"\s*,\s*|\s+")
# Below this many words the postal code alone is tried before anything else.
MIN_WORDS_FOR_ADDRESS_FIRST = 3


def extract_postal_code(address: str) -> Optional[str]:
    match = POSTAL_CODE_PATTERN.search(address)
    return match.group(0) if match else None


def tokenize_address(address: str, postal_code: Optional[str] = None) -> list[str]:
    """Split an address on commas/whitespace, dropping the postal code token."""
    words = [word for word in _WORD_SEPARATOR.split(address.strip()) if word]
    if postal_code is not None:
        words = [word for word in words if word != postal_code]
    return words


def iter_geocode_queries(address: str) -> Iterator[str]:
    """Yield candidate queries for ``address`` from most to least specific.

    Short addresses with a postal code start with the postal code alone. The
    word list is then narrowed by dropping its first word after each query,
    with the postal code appended to every query. Longer addresses fall back to
    the postal code alone once the word list is exhausted.
    """
    if not address or not address.strip():
        return

    postal_code = extract_postal_code(address)
    words = tokenize_address(address, postal_code)
    original_count = len(words)

    if postal_code is not None and original_count < MIN_WORDS_FOR_ADDRESS_FIRST:
        yield postal_code

    suffix = f" {postal_code}" if postal_code is not None else ""
    remaining = list(words)
    while remaining:
        yield " ".join(remaining) + suffix
        remaining = remaining[1:]

    if postal_code is not None and original_count >= MIN_WORDS_FOR_ADDRESS_FIRST:
        yield postal_code


def parse_coordinates(result: Optional[Mapping[str, Any]]) -> Optional[Coordinate]:
    """Build a coordinate from a geocoder match, or None if the fields are unusable."""
    if not result:
        return None
    lat_value = result.get("lat")
    lon_value = result.get("lon")
    if lat_value is None or lon_value is None:
        return None
    try:
        latitude = float(lat_value)
        longitude = float(lon_value)
    except (TypeError, ValueError) as exc:
        logger.error(f"Error parsing coordinates {lat_value!r}, {lon_value!r}: {exc}")
        return None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        logger.error(f"Geocoder returned out-of-range coordinates: {latitude}, {longitude}")
        return None
    return Coordinate(latitude=latitude, longitude=longitude)


class Geocoder:
    """Resolve addresses to coordinates; the first usable match wins."""

    def __init__(self, client: NominatimClient | None = None) -> None:
        self._client = client or NominatimClient()

    def resolve(self, address: str) -> Optional[Coordinate]:
        if not address or not address.strip():
            return None

        attempts = 0
        for query in iter_geocode_queries(address):
            attempts += 1
            coordinate = parse_coordinates(self._client.search(query))
            if coordinate is not None:
                logger.info(f"Geocoded address after {attempts} attempt(s) using query '{query}'")
                return coordinate

        logger.warning(f"Could not geocode address '{address}' after {attempts} attempt(s)")
        return None
