"""Fixtures partagées — page d'exemple et fabriques de blocs."""
import itertools

import pytest

from block_engine import BlockNode, ReusableBlock


def _make_block(id, parent=None, slot=None, position=0, block_type="paragraph", **fields) -> BlockNode:
    return BlockNode(
        id=id,
        parent_block_id=parent,
        slot=slot,
        position=position,
        block_type=block_type,
        **fields,
    )


@pytest.fixture
def block():
    """Fabrique : block("id", parent=..., slot=..., position=...)."""
    return _make_block


@pytest.fixture
def page_rows():
    """
    Page :
        intro (1)
        hero (2)
          hero-title (0)
        tabs (3)
          tab-1 : t1-b (0), t1-a (1)
          tab-2 : t2-a (0)
    """
    return [
        _make_block("hero", position=2, block_type="section"),
        _make_block("intro", position=1, block_type="heading", content={"text": "Intro"}),
        _make_block("tabs", position=3, block_type="tabs"),
        _make_block("t1-a", parent="tabs", slot="tab-1", position=1),
        _make_block("t2-a", parent="tabs", slot="tab-2", position=0),
        _make_block("t1-b", parent="tabs", slot="tab-1", position=0),
        _make_block("hero-title", parent="hero", position=0, block_type="heading"),
    ]


@pytest.fixture
def card_template():
    """Template "carte" : T (container) → titre + bouton."""
    return ReusableBlock(
        id="tpl-card",
        name="Carte",
        root_block_id="T",
        blocks=[
            _make_block("T", block_type="container", content={"title": "Hi"},
                        metadata={"spacing": {"marginTop": 8}, "colors": {"bg": "#fff"}}),
            _make_block("T-title", parent="T", position=0, block_type="heading",
                        content={"text": "Titre", "level": 2}),
            _make_block("T-button", parent="T", position=1, block_type="single_button",
                        content={"label": "Go", "links": ["/a", "/b"]}),
        ],
    )


@pytest.fixture
def id_factory():
    """Générateur d'ids déterministe : new-1, new-2…"""
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"
