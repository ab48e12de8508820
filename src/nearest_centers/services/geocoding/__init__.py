"""Address geocoding services."""

from .geocoder import Geocoder, iter_geocode_queries, parse_coordinates
from .nominatim_client import NominatimClient

__all__ = ["Geocoder", "NominatimClient", "iter_geocode_queries", "parse_coordinates"]
