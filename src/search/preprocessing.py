"""Text normalization for matching station names."""

import re
import unicodedata

# Common abbreviations in station names
ABBREVIATIONS = {
    "st": "saint",
    "ste": "sainte",
    "mt": "mont",
    "pt": "pont",
    "gd": "grand",
    "gde": "grande",
    "hbf": "hauptbahnhof",
    "bf": "bahnhof",
}

# Compile regex patterns for word boundaries
ABBREV_PATTERNS = {
    abbrev: re.compile(rf"\b{abbrev}\b", re.IGNORECASE)
    for abbrev in ABBREVIATIONS
}


def remove_accents(text: str) -> str:
    """Remove accents from text while preserving case."""
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(c for c in nfkd if not unicodedata.combining(c))


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace (collapse multiple spaces, strip)."""
    return " ".join(text.split())


def expand_abbreviations(text: str) -> str:
    """
    Expand common abbreviations in station names.

    Examples:
        "st etienne" -> "saint etienne"
        "berlin hbf" -> "berlin hauptbahnhof"
    """
    result = text
    for abbrev, expansion in ABBREVIATIONS.items():
        result = ABBREV_PATTERNS[abbrev].sub(expansion, result)
    return result


def normalize_station_name(name: str) -> str:
    """
    Normalize a station name for fuzzy matching.

    Converts to lowercase, removes accents, expands abbreviations,
    replaces hyphens and parentheses with spaces, and normalizes whitespace.

    Examples:
        "Saint-Étienne Châteaucreux" -> "saint etienne chateaucreux"
        "ST-ETIENNE" -> "saint etienne"
        "Frankfurt (Main) Hbf" -> "frankfurt main hauptbahnhof"
    """
    name = name.lower()
    name = remove_accents(name)
    name = re.sub(r"[-()]", " ", name)
    name = expand_abbreviations(name)
    return normalize_whitespace(name)
