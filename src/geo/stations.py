"""Station records and loading from stop exports."""

import csv
import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Station:
    """Train station data."""

    stop_id: str
    name: str
    lat: float
    lon: float
    country: str = ""


def parse_coordinate(value) -> float | None:
    """
    Parse a latitude or longitude value.

    Accepts numbers and numeric strings. Returns None for anything that is
    missing, non-numeric or not finite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_text(value) -> str:
    """Stripped text of a name or country field; "" when missing."""
    if value is None:
        return ""
    if not isinstance(value, str):
        # JSON exports sometimes carry numeric codes
        value = str(value)
    return value.strip()


def parse_station(stop_id: str, record: Mapping) -> Station | None:
    """
    Build a Station from a raw stop record.

    Expected keys: stop_name, stop_lat, stop_lon, stop_country (optional)

    Returns:
        Station, or None if the record has no name or unusable coordinates
    """
    if not isinstance(record, Mapping):
        return None

    name = parse_text(record.get("stop_name"))
    lat = parse_coordinate(record.get("stop_lat"))
    lon = parse_coordinate(record.get("stop_lon"))

    if not name or lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None

    return Station(
        stop_id=str(stop_id),
        name=name,
        lat=lat,
        lon=lon,
        country=parse_text(record.get("stop_country")),
    )


def parse_stops(stops: Mapping[str, Mapping]) -> list[Station]:
    """
    Convert a stop_id -> record mapping into valid stations.

    Records with malformed coordinates are dropped, never placed at (0, 0).
    Input order is preserved.
    """
    stations = []
    dropped = 0

    for stop_id, record in stops.items():
        station = parse_station(stop_id, record)
        if station is None:
            dropped += 1
            logger.debug("Dropping stop %s: missing name or invalid coordinates", stop_id)
            continue
        stations.append(station)

    logger.info("Parsed %d valid stations (%d dropped)", len(stations), dropped)
    return stations


def load_stops(filepath: str | Path) -> list[Station]:
    """
    Load stations from a stops export.

    Supports the stops.json mapping (stop_id -> record) and CSV files
    with columns: stop_id, stop_name, stop_lat, stop_lon, stop_country
    """
    filepath = Path(filepath)

    if filepath.suffix.lower() == ".csv":
        stops = {}
        with open(filepath, encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for row in reader:
                stop_id = (row.get("stop_id") or "").strip()
                if stop_id:
                    stops[stop_id] = row
    else:
        with open(filepath, encoding="utf-8") as f:
            stops = json.load(f)
        if not isinstance(stops, dict):
            raise ValueError(f"Expected a stop_id -> record mapping in {filepath}")

    logger.info("Loaded %d stops from %s", len(stops), filepath)
    return parse_stops(stops)
