"""Tests for the project JSON decoder.

Feeds paper.js-shaped project data through ``decode_project`` and checks
both the resulting scene tree and the exported lines.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from scrap_export.errors import InvalidTree
from scrap_export.scene.decoder import decode_project, load_project
from scrap_export.scene.nodes import Layer, OpaqueNode, PathFeature, PointFeature
from scrap_export.scene.settings import AreaSettings, LineSettings
from scrap_export.th2.exporter import process_project

MOCK_SEGMENTS = [
    [[-580, -92], [2, 5], [-2, -5]],
    [[-566, -125], [-14, 3], [14, -3]],
    [[-524, -126], [-4, -7], [4, 7]],
    [[-524, -90], [1, -4], [-1, 4]],
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def scrap_settings(**overrides) -> dict:
    data = {
        "className": "ScrapSettings",
        "scale": "",
        "projection": "",
        "author": "",
        "copyright": "",
        "stationNames": "",
        "map": {},
    }
    data.update(overrides)
    return data


def line_settings(**overrides) -> dict:
    data = {
        "className": "LineSettings",
        "type": "wall",
        "id": "",
        "subtypes": {},
        "segmentSettings": {},
    }
    data.update(overrides)
    return data


def station_item() -> list:
    return ["SymbolItem", {
        "matrix": [1, 0, 0, 1, 10, -20],
        "data": {"therionData": {"className": "PointSettings", "type": "station", "name": "0"}},
        "symbol": [""],
    }]


def layer(children: list, settings: dict | None = None) -> list:
    return ["Layer", {
        "children": children,
        "data": {"therionData": settings or scrap_settings()},
        "name": "scrap1",
    }]


def path_item(therion_data: dict, closed: bool = True) -> list:
    return ["Path", {
        "segments": MOCK_SEGMENTS,
        "closed": closed,
        "data": {"therionData": therion_data},
    }]


# ---------------------------------------------------------------------------
# Tree structure
# ---------------------------------------------------------------------------


class TestStructure:
    def test_dictionary_and_wrapped_layer(self) -> None:
        project = decode_project([
            ["dictionary", []],
            [layer([station_item()])],
        ])
        assert isinstance(project[0], OpaqueNode)
        assert project[0].kind == "dictionary"
        assert isinstance(project[1], Layer)
        point = project[1].children[0]
        assert isinstance(point, PointFeature)
        assert point.position == (10, -20)
        assert point.settings.name == "0"

    def test_station_scenario(self) -> None:
        project = decode_project([["dictionary", []], [layer([station_item()])]])
        assert process_project(project) == [
            "encoding utf-8",
            "scrap scrap1 ",
            "\tpoint 10 20 station -name 0",
            "endscrap",
        ]

    def test_unwrapped_layers(self) -> None:
        project = decode_project([layer([]), layer([])])
        assert [type(n) for n in project] == [Layer, Layer]

    def test_layer_without_settings_uses_defaults(self) -> None:
        project = decode_project([["Layer", {"name": "s", "children": []}]])
        assert process_project(project) == ["encoding utf-8", "scrap s ", "endscrap"]

    def test_numeric_point_name(self) -> None:
        item = station_item()
        item[1]["data"]["therionData"]["name"] = 12
        project = decode_project([layer([item])])
        assert project[0].children[0].settings.name == "12"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    def test_all_scrap_settings(self) -> None:
        settings = scrap_settings(
            scale="0 0 39.3701 0 0 0 1 0 m",
            projection="elevation 100",
            author='2021.08.01 "Author Name"',
            copyright='2021.08.01 "Author Name"',
            stationNames="prefix1 suffix1",
            map=[["walls", "on"]],
        )
        result = process_project(decode_project([layer([station_item()], settings)]))
        assert result[1] == (
            'scrap scrap1 -scale [0 0 39.3701 0 0 0 1 0 m] -projection [elevation 100] '
            '-author 2021.08.01 "Author Name" -copyright 2021.08.01 "Author Name" '
            '-station-names prefix1 suffix1 -walls on'
        )

    def test_map_as_object(self) -> None:
        project = decode_project([layer([], scrap_settings(map={"walls": "off"}))])
        assert project[0].settings.extra == {"walls": "off"}

    def test_line_settings_keys(self) -> None:
        data = line_settings(
            type="slope",
            size=2,
            subtypes={"0": "underlying", "2": "bedrock"},
            segmentSettings={"1": "smooth off"},
        )
        path = decode_project([layer([path_item(data)])])[0].children[0]
        assert isinstance(path, PathFeature)
        assert isinstance(path.settings, LineSettings)
        assert path.settings.id is None
        assert path.settings.size == 2
        assert path.settings.subtypes == {0: "underlying", 2: "bedrock"}
        assert path.settings.segment_settings == {1: "smooth off"}

    def test_blank_size_is_unset(self) -> None:
        path = decode_project([layer([path_item(line_settings(size=""))])])[0].children[0]
        assert path.settings.size is None

    def test_area_settings(self) -> None:
        data = {
            "className": "AreaSettings",
            "type": "water",
            "invisible": True,
            "lineSettings": line_settings(type="border", id="border1"),
        }
        path = decode_project([layer([path_item(data)])])[0].children[0]
        assert isinstance(path.settings, AreaSettings)
        assert path.settings.line_settings.id == "border1"
        assert process_project((Layer(name="scrap1", children=(path,)),))[-4:] == [
            "\tarea water -visibility off",
            "\t\tborder1",
            "\tendarea",
            "endscrap",
        ]


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


class TestSegments:
    def test_mixed_corner_and_curve(self) -> None:
        item = ["Path", {
            "segments": [
                [-130.87, -18.95],
                [[-24.76, -91.72], [-82.42, 0.21], [82.42, -0.21]],
            ],
            "data": {"therionData": line_settings()},
        }]
        path = decode_project([layer([item])])[0].children[0]
        assert path.closed is False
        assert not path.segments[0].has_handle_in
        assert not path.segments[0].has_handle_out
        assert path.segments[1].handle_in == (-82.42, 0.21)
        assert path.segments[1].handle_out == (82.42, -0.21)

    def test_closed_curved_export(self) -> None:
        result = process_project(decode_project([layer([path_item(line_settings())])]))
        assert result[2] == "\tline wall -close on"
        assert result[3] == result[7] == "\t\t-525 86 -578 87 -580 92"


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class TestValidation:
    def test_project_must_be_list(self) -> None:
        with pytest.raises(InvalidTree, match="must be a list"):
            decode_project({"Layer": {}})

    def test_bad_top_level_entry(self) -> None:
        with pytest.raises(InvalidTree) as excinfo:
            decode_project([layer([]), "oops"])
        assert excinfo.value.path == "project[1]"

    def test_unsupported_child(self) -> None:
        with pytest.raises(InvalidTree, match="unsupported layer child 'Raster'") as excinfo:
            decode_project([layer([["Raster", {}]])])
        assert excinfo.value.path == "project[0].children[0]"

    def test_bad_segment(self) -> None:
        item = ["Path", {
            "segments": [[0, 0], [1, 2, 3]],
            "data": {"therionData": line_settings()},
        }]
        with pytest.raises(InvalidTree) as excinfo:
            decode_project([layer([item])])
        assert excinfo.value.path == "project[0].children[0].segments[1]"

    def test_missing_therion_data(self) -> None:
        with pytest.raises(InvalidTree, match="no therionData"):
            decode_project([layer([["Path", {"segments": MOCK_SEGMENTS}]])])

    def test_missing_line_type(self) -> None:
        with pytest.raises(InvalidTree, match="LineSettingsModel validation failed"):
            decode_project([layer([path_item(line_settings(type=""))])])

    def test_bad_map(self) -> None:
        with pytest.raises(InvalidTree, match="ScrapSettingsModel"):
            decode_project([layer([], scrap_settings(map=[["only-key"]]))])


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadProject:
    def test_load_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "cave.json"
        path.write_text(json.dumps([["dictionary", []], layer([station_item()])]))
        project = load_project(path)
        assert isinstance(project[1], Layer)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_project(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("[[")
        with pytest.raises(InvalidTree, match="invalid JSON"):
            load_project(path)
