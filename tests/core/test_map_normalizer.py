"""Tests for whole map normalization."""

import copy
from pathlib import Path

import pytest

from mapconfig.core.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    MalformedLayerError,
)
from mapconfig.core.map_normalizer import (
    FileReference,
    InlineLayer,
    LEGACY_LAYER_FIELDS,
    layer_source,
    normalize_map,
)


def test_layer_source_classifies_entries() -> None:
    """Strings should be references, objects inline layers."""
    assert layer_source("a", "layers", "dapi") == FileReference("a", "layers", "dapi")
    assert layer_source("b", "layers", {"type": "tileLayer"}) == InlineLayer(
        "b", "layers", {"type": "tileLayer"}
    )


def test_legacy_fields_are_folded_into_layers() -> None:
    """No legacy collection field should survive normalization."""
    raw = {
        "type": "map",
        "author": "someone",
        "authors": "someone",
        "tilesLayers": {"t": {"type": "tilesLayer"}},
        "tileLayers": {"t2": {"type": "tileLayer"}},
        "pointsLayers": {"p": {"type": "pointsLayer"}},
        "pixelsLayers": {"px": {"type": "pixelsLayer"}},
        "guideLayers": {"g": {"type": "guideLayer"}},
        "gridLayers": {"gr": {"type": "gridLayer"}},
        "polygons": {"poly": {"type": "polygons", "polygons": {}}},
        "regions": {"reg": {"type": "drawnPolygons"}},
    }
    result = normalize_map(raw)
    configuration = result.configuration

    legacy = {name for name, _ in LEGACY_LAYER_FIELDS if name != "layers"}
    assert not legacy & set(configuration)
    assert "author" not in configuration
    assert configuration["authors"] == "someone"
    assert set(configuration["layers"]) == {"t", "t2", "p", "px", "g", "gr", "poly", "reg"}
    assert configuration["layers"]["t"]["type"] == "tileLayer"
    assert configuration["layers"]["reg"]["type"] == "featureGroup"
    assert result.ok


def test_generated_names_use_one_counter() -> None:
    """Unnamed layers should get unique ``<type>_<n>`` names."""
    raw = {"layers": {f"l{i}": {"type": "tileLayer"} for i in range(4)}}
    layers = normalize_map(raw).configuration["layers"]
    names = [layers[f"l{i}"]["name"] for i in range(4)]
    assert names == ["tileLayer_0", "tileLayer_1", "tileLayer_2", "tileLayer_3"]


def test_counter_is_shared_across_fields_and_skips_named_layers() -> None:
    """Counter should not reset per field nor advance for named layers."""
    raw = {
        "layers": {"a": {"type": "tileLayer"}, "b": {"type": "tileLayer", "name": "B"}},
        "pointsLayers": {"c": {"type": "pointsLayer"}},
    }
    layers = normalize_map(raw).configuration["layers"]
    assert layers["a"]["name"] == "tileLayer_0"
    assert layers["b"]["name"] == "B"
    assert layers["c"]["name"] == "pointsLayer_1"


def test_later_field_wins_on_key_collision() -> None:
    """Colliding keys should be overwritten in processing order."""
    raw = {
        "layers": {"x": {"type": "tileLayer", "name": "first"}},
        "pointsLayers": {"x": {"type": "pointsLayer", "name": "second"}},
    }
    layers = normalize_map(raw).configuration["layers"]
    assert layers == {"x": {"type": "pointsLayer", "name": "second"}}


def test_inline_urls_resolve_against_map_base_path() -> None:
    """Inline layer URLs should be joined with the map base path."""
    raw = {
        "basePath": "/maps/",
        "layers": {"a": {"type": "tileLayer", "url": "tiles/{z}.png"}},
    }
    layer = normalize_map(raw).configuration["layers"]["a"]
    assert layer["url"] == "/maps/tiles/{z}.png"


def test_string_reference_loads_layer_from_directory(map_dir: Path) -> None:
    """Named layer should be read from its folder and resolved there."""
    base = f"{map_dir}/"
    raw = {"basePath": base, "tilesLayers": {"dapi": "dapi"}}
    layer = normalize_map(raw).configuration["layers"]["dapi"]
    assert layer["type"] == "tileLayer"
    assert layer["name"] == "tilesLayer_0"
    assert layer["url"] == f"{map_dir}/dapi/tiles/{{z}}/{{x}}/{{y}}.png"


def test_untyped_reference_is_dropped_silently(tmp_path: Path) -> None:
    """Reference to a folder without typed config should be skipped."""
    (tmp_path / "empty").mkdir()
    raw = {"basePath": f"{tmp_path}/", "layers": {"e": "empty"}}
    result = normalize_map(raw)
    assert result.configuration["layers"] == {}
    assert result.ok


def test_bad_layers_are_collected_and_others_kept(tmp_path: Path) -> None:
    """One broken layer should not abort the whole map."""
    raw = {
        "basePath": f"{tmp_path}/",
        "layers": {
            "good": {"type": "tileLayer"},
            "untyped": {"url": "x.png"},
            "missing": "nowhere",
            "number": 3,
            "badurl": {"type": "tileLayer", "url": 5},
            "badtemplate": {"type": "tileLayer", "urlTemplate": ["a"]},
        },
    }
    result = normalize_map(raw)
    assert set(result.configuration["layers"]) == {"good"}
    errors = {issue.key: type(issue.error) for issue in result.issues}
    assert errors == {
        "untyped": MalformedLayerError,
        "missing": ConfigNotFoundError,
        "number": MalformedLayerError,
        "badurl": MalformedLayerError,
        "badtemplate": MalformedLayerError,
    }
    assert all(issue.field == "layers" for issue in result.issues)
    assert not result.ok


def test_scalar_collection_field_is_reported() -> None:
    """A collection field that is not an object or list is an issue."""
    result = normalize_map({"gridLayers": 5, "layers": {"a": {"type": "gridLayer"}}})
    assert set(result.configuration["layers"]) == {"a"}
    assert [issue.field for issue in result.issues] == ["gridLayers"]


def test_list_collection_uses_index_keys() -> None:
    """List-valued collection fields should be keyed by position."""
    result = normalize_map({"guideLayers": [{"type": "guideLayer", "name": "g"}]})
    assert result.configuration["layers"] == {"0": {"type": "guideLayer", "name": "g"}}


def test_source_is_classified() -> None:
    """Map source should be derived from the base path."""
    assert normalize_map({"basePath": "http://host/m/"}).configuration["source"] == "remote"
    assert normalize_map({"basePath": "/home/u/m/"}).configuration["source"] == "local"
    assert normalize_map({}).configuration["source"] == "local"


def test_input_map_is_not_mutated() -> None:
    """Normalization should build a new configuration."""
    raw = {
        "basePath": "/maps/",
        "tilesLayers": {"t": {"type": "tilesLayer", "tilesUrlTemplate": "a/{z}.png"}},
    }
    snapshot = copy.deepcopy(raw)
    normalize_map(raw)
    assert raw == snapshot


@pytest.mark.parametrize("base_path", [5, ["/maps/"], {"dir": "/maps/"}])
def test_non_string_base_path_is_rejected(base_path) -> None:
    """A map-level base path that is not a string should fail the map."""
    with pytest.raises(ConfigParseError) as exc_info:
        normalize_map({"basePath": base_path, "layers": {}})
    assert "basePath" in exc_info.value.reason
