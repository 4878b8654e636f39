"""Geolocation module for station records and distances."""

from .distance import haversine, haversine_matrix
from .stations import Station, load_stops, parse_stops

__all__ = ["haversine", "haversine_matrix", "Station", "load_stops", "parse_stops"]
