"""Tests for canvas document validation."""

import json

import pytest

from canvas_vault.core.canvas_schema import (
    canvas_issues,
    is_valid_canvas,
    is_valid_canvas_json,
    load_canvas_json,
    parse_canvas,
)
from canvas_vault.errors import CanvasValidationError, InvalidJsonError, InvalidParamsError

from .conftest import EMPTY_CANVAS, SAMPLE_CANVAS


def _text_node(**overrides):
    node = {"id": "n1", "type": "text", "x": 0, "y": 0, "width": 100, "height": 50, "text": "hi"}
    node.update(overrides)
    return node


def _paths(candidate):
    return [issue.path for issue in canvas_issues(candidate)]


class TestValidDocuments:
    def test_empty_object_is_valid(self):
        assert is_valid_canvas({})
        document = parse_canvas({})
        assert document.nodes == []
        assert document.edges == []

    def test_empty_arrays_are_valid(self):
        assert is_valid_canvas_json(EMPTY_CANVAS)

    def test_all_node_variants_and_edges(self):
        document = load_canvas_json(SAMPLE_CANVAS)
        assert [node.type for node in document.nodes] == ["text", "file", "link", "group"]
        assert document.edges[0].toEnd == "arrow"

    def test_integral_float_coordinates_are_accepted(self):
        assert is_valid_canvas({"nodes": [_text_node(x=10.0, width=100.0)]})

    def test_omitted_optional_fields_default_to_none(self):
        node = parse_canvas({"nodes": [_text_node()]}).nodes[0]
        assert node.color is None



class TestClosedObjects:
    def test_unknown_top_level_key(self):
        assert _paths({"nodes": [], "edges": [], "meta": {}}) == ["meta"]

    def test_unknown_node_key_reports_field_path(self):
        issues = canvas_issues({"nodes": [_text_node(colour="1")]})
        assert len(issues) == 1
        assert issues[0].path == "nodes.0.text.colour"
        assert "Extra inputs" in issues[0].message

    def test_unknown_edge_key_reports_field_path(self):
        edge = {"id": "e1", "fromNode": "a", "toNode": "b", "from": "a"}
        assert _paths({"edges": [edge]}) == ["edges.0.from"]

    def test_field_of_another_variant_is_rejected(self):
        # ``url`` belongs to link nodes only
        assert _paths({"nodes": [_text_node(url="https://example.com")]}) == ["nodes.0.text.url"]


class TestFieldRules:
    def test_explicit_null_on_optional_fields_is_rejected(self):
        edge = {"id": "e1", "fromNode": "a", "toNode": "b", "label": None, "fromSide": None}
        candidate = {"nodes": [_text_node(color=None)], "edges": [edge]}
        assert not is_valid_canvas(candidate)
        assert sorted(_paths(candidate)) == [
            "edges.0.fromSide",
            "edges.0.label",
            "nodes.0.text.color",
        ]

    def test_explicit_null_subpath_is_rejected(self):
        node = {
            "id": "f", "type": "file", "x": 0, "y": 0, "width": 10, "height": 10,
            "file": "a.md", "subpath": None,
        }
        assert _paths({"nodes": [node]}) == ["nodes.0.file.subpath"]

    def test_file_node_requires_file(self):
        node = {"id": "f", "type": "file", "x": 0, "y": 0, "width": 10, "height": 10}
        assert _paths({"nodes": [node]}) == ["nodes.0.file.file"]

    def test_unknown_node_type(self):
        assert not is_valid_canvas({"nodes": [_text_node(type="sticky")]})

    @pytest.mark.parametrize("width", [0, -5])
    def test_dimensions_must_be_positive(self, width):
        assert _paths({"nodes": [_text_node(width=width)]}) == ["nodes.0.text.width"]

    @pytest.mark.parametrize("value", ["10", True, 1.5])
    def test_coordinates_must_be_integers(self, value):
        assert _paths({"nodes": [_text_node(x=value)]}) == ["nodes.0.text.x"]

    @pytest.mark.parametrize("color", ["1", "6", "#00ff00", "#ABCDEF"])
    def test_valid_colors(self, color):
        assert is_valid_canvas({"nodes": [_text_node(color=color)]})

    @pytest.mark.parametrize("color", ["0", "7", "red", "#fff", "#12345g"])
    def test_invalid_colors(self, color):
        assert _paths({"nodes": [_text_node(color=color)]}) == ["nodes.0.text.color"]

    def test_link_node_requires_valid_url(self):
        node = {"id": "l", "type": "link", "x": 0, "y": 0, "width": 10, "height": 10, "url": "not a url"}
        issues = canvas_issues({"nodes": [node]})
        assert [issue.path for issue in issues] == ["nodes.0.link.url"]
        assert "Invalid url" in issues[0].message

    def test_subpath_must_start_with_hash(self):
        node = {
            "id": "f", "type": "file", "x": 0, "y": 0, "width": 10, "height": 10,
            "file": "a.md", "subpath": "Heading",
        }
        assert _paths({"nodes": [node]}) == ["nodes.0.file.subpath"]

    def test_edge_side_and_end_enums(self):
        edge = {"id": "e", "fromNode": "a", "toNode": "b", "fromSide": "middle", "toEnd": "circle"}
        assert sorted(_paths({"edges": [edge]})) == ["edges.0.fromSide", "edges.0.toEnd"]

    def test_group_background_style_enum(self):
        node = {
            "id": "g", "type": "group", "x": 0, "y": 0, "width": 10, "height": 10,
            "backgroundStyle": "stretch",
        }
        assert _paths({"nodes": [node]}) == ["nodes.0.group.backgroundStyle"]

    def test_nodes_must_be_an_array(self):
        assert not is_valid_canvas({"nodes": {}})
        assert not is_valid_canvas({"nodes": None})

    def test_top_level_must_be_an_object(self):
        assert not is_valid_canvas([])


class TestEntryPointsAgree:
    @pytest.mark.parametrize(
        "candidate",
        [
            {},
            {"nodes": [_text_node()]},
            {"nodes": [_text_node(colour="1")]},
            {"edges": [{"id": "e", "fromNode": "a"}]},
            {"extra": 1},
            json.loads(SAMPLE_CANVAS),
        ],
    )
    def test_boolean_and_strict_checks_agree(self, candidate):
        valid = is_valid_canvas(candidate)
        assert valid == (canvas_issues(candidate) == [])
        if valid:
            parse_canvas(candidate)
        else:
            with pytest.raises(CanvasValidationError):
                parse_canvas(candidate)

    def test_validation_error_lists_every_issue(self):
        with pytest.raises(CanvasValidationError) as exc_info:
            parse_canvas({"nodes": [_text_node(colour="1", width=0)]})
        assert isinstance(exc_info.value, InvalidParamsError)
        assert {issue.path for issue in exc_info.value.issues} == {
            "nodes.0.text.colour",
            "nodes.0.text.width",
        }
        assert "Invalid canvas JSON structure" in str(exc_info.value)

    def test_invalid_json_text(self):
        assert not is_valid_canvas_json("{nodes: []}")
        with pytest.raises(InvalidJsonError):
            load_canvas_json("{nodes: []}", "board.canvas")
