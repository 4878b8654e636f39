"""Station groups: synthesis from clusters and the JSON artifact."""

import json
import logging
import os
import tempfile
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from src.geo.stations import Station, parse_stops

from .clustering import DEFAULT_MAX_DISTANCE_KM, cluster_stations
from .names import extract_base_name, group_label

logger = logging.getLogger(__name__)

MIN_GROUP_NAME_LENGTH = 3


class GroupArtifactError(ValueError):
    """Raised when a station groups file cannot be read back."""


@dataclass(frozen=True)
class StationGroup:
    """One logical place made of one or more stations."""

    group_name: str
    display_name: str
    is_group: bool
    stations: tuple[Station, ...]
    lat: float  # Centroid latitude
    lon: float  # Centroid longitude
    country: str = ""  # Most common country among members

    @property
    def station_count(self) -> int:
        return len(self.stations)


def station_sort_key(station: Station) -> tuple[str, str, str]:
    """Alphabetical by display name, case-insensitive, with stable tiebreaks."""
    return (station.name.casefold(), station.name, station.stop_id)


def most_common_country(stations: list[Station]) -> str:
    """
    Most frequent non-empty country code.

    Ties go to the country seen first in the given order.
    """
    counts = Counter(s.country for s in stations if s.country)
    if not counts:
        return ""
    # Counter keeps insertion order, and max() returns the first maximum
    return max(counts, key=counts.get)


def build_group(
    cluster: list[Station], min_name_length: int = MIN_GROUP_NAME_LENGTH
) -> StationGroup:
    """
    Turn a cluster of stations into a StationGroup.

    Args:
        cluster: Non-empty list of stations
        min_name_length: Shortest acceptable common-prefix label

    Returns:
        StationGroup with label, centroid and dominant country
    """
    if not cluster:
        raise ValueError("Cannot build a station group from an empty cluster")

    stations = sorted(cluster, key=station_sort_key)

    if len(stations) == 1:
        station = stations[0]
        return StationGroup(
            group_name=station.name,
            display_name=station.name,
            is_group=False,
            stations=(station,),
            lat=station.lat,
            lon=station.lon,
            country=station.country,
        )

    group_name = group_label([s.name for s in stations], min_length=min_name_length)

    # Plain mean; good enough at cluster radii of a few tens of km
    avg_lat = sum(s.lat for s in stations) / len(stations)
    avg_lon = sum(s.lon for s in stations) / len(stations)

    return StationGroup(
        group_name=group_name,
        display_name=f"{group_name} ({len(stations)} stations)",
        is_group=True,
        stations=tuple(stations),
        lat=avg_lat,
        lon=avg_lon,
        country=most_common_country(stations),
    )


def build_station_groups(
    stops: Mapping[str, Mapping],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    min_name_length: int = MIN_GROUP_NAME_LENGTH,
    progress: bool = False,
) -> list[StationGroup]:
    """
    Build station groups from a stop_id -> record mapping.

    Stops with unusable coordinates are left out of the result.
    """
    stations = parse_stops(stops)
    return group_stations(stations, max_distance_km, min_name_length, progress)


def group_stations(
    stations: list[Station],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    min_name_length: int = MIN_GROUP_NAME_LENGTH,
    progress: bool = False,
) -> list[StationGroup]:
    """Cluster already-parsed stations and label each cluster."""
    clusters = cluster_stations(stations, max_distance_km=max_distance_km, progress=progress)
    groups = [build_group(cluster, min_name_length) for cluster in clusters]

    multi = sum(1 for g in groups if g.is_group)
    logger.info("Built %d station groups (%d with several stations)", len(groups), multi)

    duplicates = duplicate_group_names(groups)
    if duplicates:
        # Lookups by name (stored selections, /api/groups) resolve to the first one
        logger.warning(
            "%d group names are shared by separate groups: %s",
            len(duplicates),
            ", ".join(duplicates[:10]),
        )
    return groups


def duplicate_group_names(groups: list[StationGroup]) -> list[str]:
    """Group names used by more than one group, in first-seen order."""
    counts = Counter(g.group_name for g in groups)
    return [name for name, count in counts.items() if count > 1]


def station_to_dict(station: Station) -> dict:
    return {
        "stop_id": station.stop_id,
        "stop_name": station.name,
        "lat": station.lat,
        "lon": station.lon,
        "stop_country": station.country,
        "base_name": extract_base_name(station.name),
    }


def group_to_dict(group: StationGroup) -> dict:
    """Serialize a group to the record format read by the web frontend."""
    return {
        "groupName": group.group_name,
        "displayName": group.display_name,
        "isGroup": group.is_group,
        "stations": [station_to_dict(s) for s in group.stations],
        "lat": group.lat,
        "lon": group.lon,
        "stop_country": group.country,
    }


def group_from_dict(record: Mapping) -> StationGroup:
    """Rebuild a StationGroup from its serialized record."""
    try:
        stations = tuple(
            Station(
                stop_id=str(s["stop_id"]),
                name=s["stop_name"],
                lat=float(s["lat"]),
                lon=float(s["lon"]),
                country=s.get("stop_country") or "",
            )
            for s in record["stations"]
        )
        return StationGroup(
            group_name=record["groupName"],
            display_name=record["displayName"],
            is_group=bool(record["isGroup"]),
            stations=stations,
            lat=float(record["lat"]),
            lon=float(record["lon"]),
            country=record.get("stop_country") or "",
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GroupArtifactError(f"Invalid station group record: {e}") from e


def save_station_groups(groups: list[StationGroup], filepath: str | Path) -> None:
    """
    Write station groups as JSON.

    The file is replaced in one step, so readers see either the previous
    artifact or the complete new one.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump([group_to_dict(g) for g in groups], f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, filepath)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Saved %d station groups to %s", len(groups), filepath)


def load_station_groups(filepath: str | Path) -> list[StationGroup]:
    """Load station groups written by save_station_groups()."""
    filepath = Path(filepath)

    try:
        with open(filepath, encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        raise GroupArtifactError(f"{filepath} is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise GroupArtifactError(f"Expected a list of station groups in {filepath}")

    groups = [group_from_dict(record) for record in records]
    logger.info("Loaded %d station groups from %s", len(groups), filepath)
    return groups
