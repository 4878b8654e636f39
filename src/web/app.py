"""
FastAPI web interface for Station Groups.

Serves the precomputed station groups to the typeahead search and the
map renderer. The groups file is read once at startup and never modified.
"""

import logging

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from src import config
from src.grouping import (
    GroupArtifactError,
    StationGroup,
    load_station_groups,
    resolve_selection,
    selected_station_ids,
)
from src.search import search_station_groups, suggest_station_groups

logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="Station Groups",
    description="Search and map nearby stations grouped into logical places",
    version="0.1.0",
)

# Global instances (loaded on startup)
station_groups: list[StationGroup] = []


class StationResponse(BaseModel):
    """A single station inside a group."""

    stop_id: str
    name: str
    lat: float
    lon: float
    country: str = ""


class StationGroupResponse(BaseModel):
    """Response model for a station group."""

    group_name: str
    display_name: str
    is_group: bool
    station_count: int
    lat: float  # Centroid latitude
    lon: float  # Centroid longitude
    country: str = ""
    stations: list[StationResponse]


class SuggestionResponse(BaseModel):
    """Fuzzy suggestion for a misspelled query."""

    group_name: str
    display_name: str
    score: int


class MarkerResponse(BaseModel):
    """One map marker per logical place."""

    group_name: str
    lat: float
    lon: float
    station_count: int
    country: str = ""


class SelectionRequest(BaseModel):
    """Group names previously chosen by a user."""

    group_names: list[str]


class SelectionResponse(BaseModel):
    """Resolved selection with the station ids to filter trips on."""

    groups: list[StationGroupResponse]
    station_ids: list[str]


def to_response(group: StationGroup) -> StationGroupResponse:
    return StationGroupResponse(
        group_name=group.group_name,
        display_name=group.display_name,
        is_group=group.is_group,
        station_count=group.station_count,
        lat=group.lat,
        lon=group.lon,
        country=group.country,
        stations=[
            StationResponse(
                stop_id=s.stop_id,
                name=s.name,
                lat=s.lat,
                lon=s.lon,
                country=s.country,
            )
            for s in group.stations
        ],
    )


@app.on_event("startup")
async def startup_event():
    """Load station groups on startup."""
    global station_groups

    if not config.GROUPS_FILE.exists():
        logger.warning("Station groups file not found: %s", config.GROUPS_FILE)
        return

    try:
        station_groups = load_station_groups(config.GROUPS_FILE)
    except GroupArtifactError as e:
        logger.error("Could not load station groups: %s", e)
        station_groups = []


@app.get("/api/search", response_model=list[StationGroupResponse])
async def api_search(
    q: str = Query(default=""),
    limit: int = Query(default=config.SEARCH_LIMIT, ge=1, le=200),
) -> list[StationGroupResponse]:
    """Typeahead search over station groups."""
    return [to_response(g) for g in search_station_groups(station_groups, q, limit=limit)]


@app.get("/api/suggest", response_model=list[SuggestionResponse])
async def api_suggest(
    q: str = Query(default=""),
    limit: int = Query(default=5, ge=1, le=50),
) -> list[SuggestionResponse]:
    """Did-you-mean suggestions for queries with typos."""
    suggestions = suggest_station_groups(
        station_groups, q, limit=limit, threshold=config.SUGGEST_THRESHOLD
    )
    return [
        SuggestionResponse(group_name=g.group_name, display_name=g.display_name, score=score)
        for g, score in suggestions
    ]


@app.get("/api/groups/{group_name}", response_model=StationGroupResponse)
async def api_group(group_name: str) -> StationGroupResponse:
    """Get a single station group by name."""
    for group in station_groups:
        if group.group_name == group_name:
            return to_response(group)
    raise HTTPException(status_code=404, detail=f"Unknown station group: {group_name}")


@app.get("/api/markers", response_model=list[MarkerResponse])
async def api_markers() -> list[MarkerResponse]:
    """One marker per station group for the map."""
    return [
        MarkerResponse(
            group_name=g.group_name,
            lat=g.lat,
            lon=g.lon,
            station_count=g.station_count,
            country=g.country,
        )
        for g in station_groups
    ]


@app.post("/api/selection", response_model=SelectionResponse)
async def api_selection(selection: SelectionRequest) -> SelectionResponse:
    """Resolve stored group names to groups and their station ids."""
    groups = resolve_selection(station_groups, selection.group_names)
    return SelectionResponse(
        groups=[to_response(g) for g in groups],
        station_ids=sorted(selected_station_ids(groups)),
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "groups_loaded": len(station_groups),
    }
