"""Tests TreeAssembler — ordre, slots, profondeur, orphelins, requêtes."""
import logging

from block_engine import BlockTypeSpec, BlockRegistry
from block_engine.tree.assembler import (
    ANY_SLOT,
    assemble,
    build_children_index,
    build_tree,
    compute_depths,
    find_duplicate_positions,
    find_orphans,
    flatten_tree,
    get_block_path,
    get_children,
    get_descendants,
    select_by_slot,
    select_by_type,
)


def ids(items):
    return [item.id for item in items]


# ── Ordre ─────────────────────────────────────────────────────────────────────

def test_assemble_orders_by_position(block):
    rows = [block("c", position=3), block("a", position=1), block("b", position=2)]
    assert ids(assemble(rows)) == ["a", "b", "c"]


def test_assemble_full_page_preorder(page_rows):
    result = assemble(page_rows)
    assert ids(result) == ["intro", "hero", "hero-title", "tabs", "t2-a", "t1-b", "t1-a"]
    assert [item.depth for item in result] == [0, 0, 1, 0, 1, 1, 1]


def test_assemble_ties_keep_collection_order(block):
    rows = [block("x", position=1), block("y", position=0), block("z", position=1)]
    assert ids(assemble(rows)) == ["y", "x", "z"]


def test_assemble_accepts_raw_rows():
    rows = [
        {"id": "b", "block_type": "heading", "position": 2, "parent_block_id": None},
        {"id": "a", "block_type": "heading", "position": None, "parent_block_id": ""},
    ]
    assert ids(assemble(rows)) == ["a", "b"]


def test_assemble_is_deterministic(page_rows):
    assert ids(assemble(page_rows)) == ids(assemble(list(page_rows)))


# ── Slots ─────────────────────────────────────────────────────────────────────

def test_slot_isolation(page_rows):
    assert ids(assemble(page_rows, "tabs", "tab-1")) == ["t1-b", "t1-a"]
    assert ids(assemble(page_rows, "tabs", "tab-2")) == ["t2-a"]
    assert "t1-a" not in ids(assemble(page_rows, "tabs", "tab-2"))


def test_null_and_empty_are_equivalent(block):
    rows = [block("a", parent="", slot="", position=0), block("b", parent=None, slot=None, position=1)]
    assert ids(assemble(rows, None, None)) == ["a", "b"]
    assert ids(assemble(rows, "", "")) == ["a", "b"]


def test_slot_filter_narrows_children(block):
    rows = [
        block("cols", block_type="columns"),
        block("left", parent="cols", slot="column1", position=0),
        block("right", parent="cols", slot="column2", position=0),
    ]
    result = assemble(rows, slot_filter=lambda node: "column2" if node.id == "cols" else ANY_SLOT)
    assert ids(result) == ["cols", "right"]


def test_get_children(page_rows):
    assert [n.id for n in get_children(page_rows, "tabs", "tab-1")] == ["t1-b", "t1-a"]
    assert [n.id for n in get_children(page_rows, None)] == ["intro", "hero", "tabs"]


def test_build_children_index_groups(page_rows):
    index = build_children_index(page_rows)
    assert [n.id for n in index[("tabs", "tab-1")]] == ["t1-b", "t1-a"]
    assert [n.id for n in index[(None, None)]] == ["intro", "hero", "tabs"]


# ── Données dégradées ─────────────────────────────────────────────────────────

def test_dangling_parent_is_unreachable(block):
    rows = [block("root"), block("ghost-child", parent="ghost")]
    assert ids(assemble(rows)) == ["root"]
    assert [n.id for n in find_orphans(rows)] == ["ghost-child"]


def test_cycle_does_not_loop(block, caplog):
    rows = [block("a", parent="b"), block("b", parent="a"), block("root")]
    with caplog.at_level(logging.WARNING):
        assert ids(assemble(rows)) == ["root"]
        assert ids(assemble(rows, "a")) == ["b"]
    assert sorted(n.id for n in find_orphans(rows)) == ["a", "b"]


def test_self_parent_is_orphan(block):
    assert [n.id for n in find_orphans([block("s", parent="s")])] == ["s"]


def test_unknown_block_type_is_degraded_not_error(block):
    registry = BlockRegistry([BlockTypeSpec(block_type="heading")])
    rows = [block("a", block_type="heading"), block("b", block_type="carousel", position=1)]
    result = assemble(rows, registry=registry)
    assert [item.degraded for item in result] == [False, True]
    assert result[1].node.block_type == "carousel"


def test_no_registry_means_not_degraded(block):
    assert assemble([block("a", block_type="whatever")])[0].degraded is False


def test_duplicate_positions_reported_not_fixed(block):
    rows = [block("a", position=1), block("b", position=1), block("c", parent="a", slot="s", position=0)]
    assert find_duplicate_positions(rows) == {(None, None): [1]}
    assert ids(assemble(rows)) == ["a", "c", "b"]


# ── Arbre imbriqué / requêtes ─────────────────────────────────────────────────

def test_build_tree_nests_children(page_rows):
    tree = build_tree(page_rows)
    assert [t.node.id for t in tree] == ["intro", "hero", "tabs"]
    assert [c.node.id for c in tree[2].children] == ["t2-a", "t1-b", "t1-a"]
    assert tree[1].children[0].depth == 1


def test_flatten_tree_matches_assemble(page_rows):
    assert ids(flatten_tree(build_tree(page_rows))) == ids(assemble(page_rows))


def test_get_block_path(page_rows):
    assert [n.id for n in get_block_path(page_rows, "t1-a")] == ["tabs", "t1-a"]
    assert get_block_path(page_rows, "nope") == []


def test_get_descendants(page_rows):
    assert [n.id for n in get_descendants(page_rows, "tabs")] == ["t2-a", "t1-b", "t1-a"]
    assert get_descendants(page_rows, "intro") == []


def test_compute_depths(page_rows):
    depths = compute_depths(page_rows)
    assert depths["tabs"] == 0
    assert depths["t1-a"] == 1


def test_select_by_type_and_slot(page_rows):
    assert [n.id for n in select_by_type(page_rows, "heading")] == ["intro", "hero-title"]
    assert [n.id for n in select_by_slot(page_rows, "tab-1")] == ["t1-b", "t1-a"]
