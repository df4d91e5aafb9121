"""Tests PathStore — get/set/has/remove par chemin pointé."""
import pytest

from block_engine.core.paths import (
    flatten_paths,
    get_path,
    has_override,
    remove_override,
    set_path,
)


# ── get_path ──────────────────────────────────────────────────────────────────

def test_get_nested_value():
    obj = {"metadata": {"spacing": {"marginTop": 12}}}
    assert get_path(obj, "metadata.spacing.marginTop") == 12


def test_get_returns_subtree():
    obj = {"a": {"b": {"c": 1}}}
    assert get_path(obj, "a.b") is obj["a"]["b"]


@pytest.mark.parametrize("path", ["x", "a.x", "a.b.c.d", "a.n.z"])
def test_get_missing_returns_none(path):
    obj = {"a": {"b": 1, "n": None}}
    assert get_path(obj, path) is None


def test_get_none_object():
    assert get_path(None, "a.b") is None


def test_get_keeps_falsy_leaves():
    obj = {"a": {"zero": 0, "empty": "", "off": False}}
    assert get_path(obj, "a.zero") == 0
    assert get_path(obj, "a.empty") == ""
    assert get_path(obj, "a.off") is False


# ── set_path ──────────────────────────────────────────────────────────────────

def test_set_creates_intermediates():
    assert set_path({}, "a.b.c", 1) == {"a": {"b": {"c": 1}}}


def test_set_does_not_mutate_input():
    obj = {"a": {"b": 1}}
    result = set_path(obj, "a.b", 2)
    assert obj == {"a": {"b": 1}}
    assert result == {"a": {"b": 2}}


def test_set_keeps_untouched_siblings_by_reference():
    obj = {"a": {"b": 1}, "x": {"y": [1, 2]}}
    result = set_path(obj, "a.b", 2)
    assert result["x"] is obj["x"]
    assert result["a"] is not obj["a"]


def test_set_replaces_array_wholesale():
    assert set_path({"a": [1, 2, 3]}, "a", [9]) == {"a": [9]}


@pytest.mark.parametrize("intermediate", [None, 5, "texte", [1, 2]])
def test_set_coerces_non_object_intermediate(intermediate):
    """Un segment intermédiaire non-dict est remplacé par {} (comportement permissif)."""
    assert set_path({"a": intermediate}, "a.b", 1) == {"a": {"b": 1}}


def test_set_on_none_object():
    assert set_path(None, "a", 1) == {"a": 1}


def test_set_empty_path_uses_empty_key():
    assert set_path({"a": 1}, "", 2) == {"a": 1, "": 2}


# ── has_override / remove_override ───────────────────────────────────────────

def test_has_override_is_flat_key_membership():
    overrides = {"content.title": "Bye"}
    assert has_override(overrides, "content.title") is True
    assert has_override(overrides, "content") is False
    assert has_override(None, "content.title") is False


def test_has_override_does_not_walk_nested_objects():
    assert has_override({"a": {"b": 1}}, "a.b") is False


def test_remove_override_returns_new_map():
    overrides = {"content.title": "Bye", "metadata.color": "red"}
    result = remove_override(overrides, "content.title")
    assert result == {"metadata.color": "red"}
    assert overrides == {"content.title": "Bye", "metadata.color": "red"}


def test_remove_absent_key_is_noop():
    overrides = {"content.title": "Bye"}
    assert remove_override(overrides, "content.nope") == overrides
    assert remove_override(None, "x") == {}


def test_remove_set_inverse():
    path = "content.title"
    assert has_override(remove_override(set_path({}, path, "v"), path), path) is False
    assert has_override(remove_override({path: "v"}, path), path) is False


# ── flatten_paths ─────────────────────────────────────────────────────────────

def test_flatten_paths_lists_leaves():
    obj = {"a": {"b": 1, "c": {"d": [1, 2]}}, "e": {}, "f": None}
    assert flatten_paths(obj) == {"a.b": 1, "a.c.d": [1, 2], "e": {}, "f": None}


def test_flatten_paths_with_prefix():
    assert flatten_paths({"title": "Hi"}, "content") == {"content.title": "Hi"}
