"""Helpers at the boundary with stored user selections and the trip filter."""

from collections.abc import Iterable

from .groups import StationGroup


def resolve_selection(
    groups: list[StationGroup], group_names: Iterable[str]
) -> list[StationGroup]:
    """
    Map stored group names back to the current station groups.

    Keeps the stored order. Names that no longer exist after a rebuild
    are skipped, and repeated names are returned once. When separate
    groups share a name, the first one in the list is used.
    """
    by_name: dict[str, StationGroup] = {}
    for group in groups:
        by_name.setdefault(group.group_name, group)

    resolved = []
    seen = set()
    for name in group_names:
        group = by_name.get(name)
        if group is None or name in seen:
            continue
        seen.add(name)
        resolved.append(group)
    return resolved


def selected_station_ids(groups: Iterable[StationGroup]) -> set[str]:
    """All station ids covered by the selected groups."""
    return {station.stop_id for group in groups for station in group.stations}
