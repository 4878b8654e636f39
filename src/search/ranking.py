"""Relevance-ranked substring search over station groups."""

from src.grouping.groups import StationGroup

DEFAULT_SEARCH_LIMIT = 20


def matches_query(group: StationGroup, query: str) -> bool:
    """
    Check whether a lower-cased query occurs in a group.

    Looks at the group name, display name, country and the names of
    the member stations.
    """
    if query in group.group_name.lower():
        return True
    if query in group.display_name.lower():
        return True
    if group.country and query in group.country.lower():
        return True
    return any(query in station.name.lower() for station in group.stations)


def relevance_key(group: StationGroup, query: str) -> tuple:
    """
    Sort key for a matching group; lower sorts first.

    Order: exact name match, exact display match, name prefix, display
    prefix, multi-station groups (larger first), then display name.
    """
    name = group.group_name.lower()
    display = group.display_name.lower()

    if group.is_group:
        size_rank = (0, -group.station_count)
    else:
        size_rank = (1, 0)

    return (
        name != query,
        display != query,
        not name.startswith(query),
        not display.startswith(query),
        size_rank,
        display,
    )


def search_station_groups(
    groups: list[StationGroup], query: str, limit: int = DEFAULT_SEARCH_LIMIT
) -> list[StationGroup]:
    """
    Search station groups by name or country.

    An empty query returns no results rather than every group.

    Args:
        groups: Station groups to search
        query: Free-text search term (case-insensitive)
        limit: Maximum number of results

    Returns:
        Matching groups, most relevant first
    """
    if not query or limit <= 0:
        return []

    query = query.lower()
    matches = [g for g in groups if matches_query(g, query)]
    matches.sort(key=lambda g: relevance_key(g, query))
    return matches[:limit]
