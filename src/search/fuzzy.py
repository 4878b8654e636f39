"""Fuzzy "did you mean" suggestions for station group names."""

from rapidfuzz import fuzz, process

from src.grouping.groups import StationGroup

from .preprocessing import normalize_station_name

DEFAULT_SUGGEST_LIMIT = 5
DEFAULT_SUGGEST_THRESHOLD = 70


def suggest_station_groups(
    groups: list[StationGroup],
    query: str,
    limit: int = DEFAULT_SUGGEST_LIMIT,
    threshold: int = DEFAULT_SUGGEST_THRESHOLD,
) -> list[tuple[StationGroup, int]]:
    """
    Find groups whose name is close to a possibly misspelled query.

    Useful for typos like "Marseile" -> "Marseille Saint-Charles".

    Args:
        groups: Station groups to search
        query: Search term, possibly with typos
        limit: Maximum number of suggestions
        threshold: Minimum similarity score (0-100)

    Returns:
        List of (group, score) sorted by score descending
    """
    query_normalized = normalize_station_name(query) if query else ""
    if not query_normalized or not groups or limit <= 0:
        return []

    choices = [normalize_station_name(g.group_name) for g in groups]

    results = process.extract(
        query_normalized,
        choices,
        scorer=fuzz.WRatio,
        limit=limit,
        score_cutoff=threshold,
    )

    return [(groups[idx], int(score)) for _choice, score, idx in results]
