"""Search module for finding station groups."""

from .fuzzy import suggest_station_groups
from .preprocessing import normalize_station_name
from .ranking import search_station_groups

__all__ = ["search_station_groups", "suggest_station_groups", "normalize_station_name"]
