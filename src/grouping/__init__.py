"""Grouping module for clustering stations into logical places."""

from .clustering import candidate_pairs, cluster_stations
from .groups import (
    GroupArtifactError,
    StationGroup,
    build_group,
    build_station_groups,
    duplicate_group_names,
    group_stations,
    load_station_groups,
    save_station_groups,
)
from .names import extract_base_name, group_label, longest_common_prefix
from .selection import resolve_selection, selected_station_ids

__all__ = [
    "GroupArtifactError",
    "StationGroup",
    "build_group",
    "build_station_groups",
    "candidate_pairs",
    "cluster_stations",
    "duplicate_group_names",
    "extract_base_name",
    "group_label",
    "group_stations",
    "load_station_groups",
    "longest_common_prefix",
    "resolve_selection",
    "save_station_groups",
    "selected_station_ids",
]
