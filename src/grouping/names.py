"""Station name heuristics used to label station groups."""

import re

# Closing words that name the kind of station rather than the place
STATION_SUFFIXES = [
    "Hbf",
    "Hauptbahnhof",
    "HB",
    "Bf",
    "Bahnhof",
    "Station",
    "Central Station",
    "Main Station",
    "Gare",
    "Centrale",
    "Central",
    "Centraal",
    "Airport",
    "Flughafen",
    "Aéroport",
    "Aeropuerto",
    "Nord",
    "Sud",
    "Süd",
    "Ost",
    "West",
    "Est",
    "North",
    "South",
    "East",
    "Ostbahnhof",
    "Westbahnhof",
    "Südbahnhof",
    "Nordbahnhof",
    "Ostkreuz",
    "Westkreuz",
]

# Longest alternatives first so "Central Station" wins over "Station"
SUFFIX_PATTERN = re.compile(
    r"\s+(?:"
    + "|".join(re.escape(s) for s in sorted(STATION_SUFFIXES, key=len, reverse=True))
    + r")$",
    re.IGNORECASE,
)

FALLBACK_LABEL = "Cluster ({name}, ...)"


def extract_base_name(station_name: str) -> str:
    """
    Extract the place part of a station name.

    Parenthetical qualifiers are kept as part of the base name; otherwise
    a trailing station-type word is removed.

    Examples:
        "Frankfurt (Main) Hbf" -> "Frankfurt (Main)"
        "Berlin Hauptbahnhof" -> "Berlin"
        "Amsterdam Central Station" -> "Amsterdam"
        "Lyon Part Dieu" -> "Lyon Part Dieu"
    """
    name = station_name.strip()

    open_paren = name.find("(")
    close_paren = name.rfind(")")
    if open_paren != -1 and close_paren > open_paren:
        return name[: close_paren + 1].strip()

    match = SUFFIX_PATTERN.search(name)
    if match:
        return name[: match.start()].strip()

    return name


def longest_common_prefix(names: list[str]) -> str:
    """
    Find the longest common prefix of station names.

    Only the lexicographic extremes are compared: any prefix shared by
    every name is also shared by the first and last in sorted order.

    Examples:
        ["Frankfurt (Main) Hbf", "Frankfurt (Main) Süd"] -> "Frankfurt (Main)"
        ["Paris Est"] -> "Paris Est"
        [] -> ""
    """
    if not names:
        return ""
    if len(names) == 1:
        return names[0]

    ordered = sorted(names)
    first, last = ordered[0], ordered[-1]

    i = 0
    while i < len(first) and i < len(last) and first[i] == last[i]:
        i += 1

    return first[:i].rstrip()


def group_label(names: list[str], min_length: int = 3) -> str:
    """
    Derive a readable label for a group of stations.

    Uses the common prefix of the names; when it is empty or shorter than
    min_length, falls back to a label built on the first name in sorted
    order so it stays stable between runs.
    """
    label = longest_common_prefix(names)
    if len(names) > 1 and len(label) < min_length:
        label = FALLBACK_LABEL.format(name=sorted(names)[0])
    return label
