"""Tests for station group synthesis and the groups file."""

import json
import logging

import pytest

from src.geo.stations import Station
from src.grouping.groups import (
    GroupArtifactError,
    build_group,
    build_station_groups,
    duplicate_group_names,
    group_to_dict,
    load_station_groups,
    most_common_country,
    save_station_groups,
)
from src.grouping.selection import resolve_selection, selected_station_ids

BERLIN_STOPS = {
    "A": {"stop_name": "Berlin Hbf", "stop_lat": "52.525", "stop_lon": "13.369", "stop_country": "DE"},
    "B": {"stop_name": "Berlin Ostbahnhof", "stop_lat": "52.510", "stop_lon": "13.435", "stop_country": "DE"},
}


def make_station(stop_id, name, lat=50.0, lon=8.0, country=""):
    return Station(stop_id=stop_id, name=name, lat=lat, lon=lon, country=country)


class TestBuildGroup:
    """Tests for turning clusters into groups."""

    def test_singleton(self):
        station = make_station("1", "Paris Est", 48.876, 2.359, "FR")

        group = build_group([station])

        assert group.group_name == "Paris Est"
        assert group.display_name == "Paris Est"
        assert not group.is_group
        assert group.stations == (station,)
        assert (group.lat, group.lon) == (48.876, 2.359)
        assert group.country == "FR"

    def test_multi_station(self):
        sud = make_station("2", "Frankfurt (Main) Süd", 50.099, 8.686, "DE")
        hbf = make_station("1", "Frankfurt (Main) Hbf", 50.107, 8.663, "DE")

        group = build_group([sud, hbf])

        assert group.group_name == "Frankfurt (Main)"
        assert group.display_name == "Frankfurt (Main) (2 stations)"
        assert group.is_group
        assert group.station_count == 2
        assert [s.name for s in group.stations] == ["Frankfurt (Main) Hbf", "Frankfurt (Main) Süd"]
        assert group.lat == pytest.approx((50.099 + 50.107) / 2)
        assert group.lon == pytest.approx((8.686 + 8.663) / 2)
        assert group.country == "DE"

    def test_fallback_label(self):
        group = build_group([make_station("1", "Zaandam"), make_station("2", "Amsterdam Sloterdijk")])

        assert group.group_name == "Cluster (Amsterdam Sloterdijk, ...)"
        assert group.display_name == "Cluster (Amsterdam Sloterdijk, ...) (2 stations)"

    def test_members_sorted_case_insensitively(self):
        group = build_group(
            [make_station("1", "basel SBB"), make_station("2", "Basel Bad Bf"), make_station("3", "Basel St. Johann")]
        )

        assert [s.name for s in group.stations] == ["Basel Bad Bf", "basel SBB", "Basel St. Johann"]

    def test_empty_cluster(self):
        with pytest.raises(ValueError):
            build_group([])


class TestMostCommonCountry:
    """Tests for the dominant country of a group."""

    def test_most_frequent(self):
        stations = [make_station("1", "A", country="DE"), make_station("2", "B", country="CH"), make_station("3", "C", country="CH")]
        assert most_common_country(stations) == "CH"

    def test_tie_goes_to_first_seen(self):
        stations = [make_station("1", "A", country="DE"), make_station("2", "B", country="CH")]
        assert most_common_country(stations) == "DE"

    def test_empty_countries_ignored(self):
        stations = [make_station("1", "A"), make_station("2", "B"), make_station("3", "C", country="FR")]
        assert most_common_country(stations) == "FR"

    def test_no_country(self):
        assert most_common_country([make_station("1", "A")]) == ""

    def test_tie_after_sorting(self):
        group = build_group([make_station("1", "Zug", country="CH"), make_station("2", "Zell", country="AT")])
        assert group.country == "AT"


class TestBuildStationGroups:
    """Tests for the full engine run."""

    def test_berlin_grouped(self):
        groups = build_station_groups(BERLIN_STOPS, max_distance_km=25)

        assert len(groups) == 1
        assert groups[0].is_group
        assert groups[0].display_name.startswith("Berlin")
        assert groups[0].group_name == "Berlin"

    def test_berlin_split(self):
        groups = build_station_groups(BERLIN_STOPS, max_distance_km=1)

        assert len(groups) == 2
        assert not any(g.is_group for g in groups)
        assert [g.display_name for g in groups] == ["Berlin Hbf", "Berlin Ostbahnhof"]

    def test_invalid_coordinates_excluded(self):
        stops = dict(BERLIN_STOPS)
        stops["C"] = {"stop_name": "Berlin Nowhere", "stop_lat": "", "stop_lon": "13.4"}
        stops["D"] = {"stop_name": "Null Island", "stop_lat": "abc", "stop_lon": "0"}

        groups = build_station_groups(stops)

        ids = [s.stop_id for g in groups for s in g.stations]
        assert sorted(ids) == ["A", "B"]

    def test_empty_input(self):
        assert build_station_groups({}) == []

    def test_shared_names_warned(self, caplog):
        stops = {
            "IL-1": {"stop_name": "Springfield Amtrak", "stop_lat": "39.802", "stop_lon": "-89.651"},
            "IL-2": {"stop_name": "Springfield Bus", "stop_lat": "39.799", "stop_lon": "-89.644"},
            "MA-1": {"stop_name": "Springfield Union", "stop_lat": "42.106", "stop_lon": "-72.593"},
            "MA-2": {"stop_name": "Springfield Depot", "stop_lat": "42.101", "stop_lon": "-72.589"},
        }

        with caplog.at_level(logging.WARNING, logger="src.grouping.groups"):
            groups = build_station_groups(stops)

        assert [g.group_name for g in groups] == ["Springfield", "Springfield"]
        assert duplicate_group_names(groups) == ["Springfield"]
        assert "shared by separate groups: Springfield" in caplog.text

    def test_unique_names_not_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="src.grouping.groups"):
            groups = build_station_groups(BERLIN_STOPS)

        assert duplicate_group_names(groups) == []
        assert caplog.text == ""


class TestResolveSelection:
    """Tests for mapping stored group names back to groups."""

    def test_order_kept_and_unknown_skipped(self):
        paris = build_group([make_station("1", "Paris Est")])
        lyon = build_group([make_station("2", "Lyon Part-Dieu")])

        resolved = resolve_selection([paris, lyon], ["Lyon Part-Dieu", "Gone", "Paris Est", "Lyon Part-Dieu"])

        assert resolved == [lyon, paris]
        assert selected_station_ids(resolved) == {"1", "2"}

    def test_shared_name_resolves_to_first_group(self):
        illinois = build_group(
            [make_station("IL-1", "Springfield Amtrak"), make_station("IL-2", "Springfield Bus")]
        )
        massachusetts = build_group(
            [make_station("MA-1", "Springfield Union", lat=42.1), make_station("MA-2", "Springfield Depot", lat=42.1)]
        )

        resolved = resolve_selection([illinois, massachusetts], ["Springfield"])

        assert resolved == [illinois]


class TestGroupsFile:
    """Tests for saving and loading the groups file."""

    def test_save_and_load(self, tmp_path):
        groups = build_station_groups(BERLIN_STOPS) + build_station_groups(
            {"P": {"stop_name": "Paris Est", "stop_lat": 48.876, "stop_lon": 2.359}}
        )
        path = tmp_path / "station-groups.json"

        save_station_groups(groups, path)

        assert load_station_groups(path) == groups
        assert [p.name for p in tmp_path.iterdir()] == ["station-groups.json"]

    def test_record_format(self):
        group = build_station_groups(BERLIN_STOPS)[0]

        record = group_to_dict(group)

        assert record["groupName"] == "Berlin"
        assert record["displayName"] == "Berlin (2 stations)"
        assert record["isGroup"] is True
        assert record["stop_country"] == "DE"
        assert record["stations"][0]["stop_name"] == "Berlin Hbf"
        assert record["stations"][0]["base_name"] == "Berlin"

    def test_overwrite_replaces_previous(self, tmp_path):
        path = tmp_path / "station-groups.json"
        save_station_groups(build_station_groups(BERLIN_STOPS, max_distance_km=1), path)
        save_station_groups(build_station_groups(BERLIN_STOPS, max_distance_km=25), path)

        assert len(load_station_groups(path)) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "station-groups.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(GroupArtifactError):
            load_station_groups(path)

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "station-groups.json"
        path.write_text(json.dumps([{"groupName": "Berlin"}]), encoding="utf-8")

        with pytest.raises(GroupArtifactError):
            load_station_groups(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "station-groups.json"
        path.write_text(json.dumps({"groupName": "Berlin"}), encoding="utf-8")

        with pytest.raises(GroupArtifactError):
            load_station_groups(path)
