"""Arbre de blocs — assemblage ordonné + planification des positions."""
from .assembler import (
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
from .positions import (
    apply_patches,
    can_move_left,
    can_move_right,
    normalize_positions,
    plan_drop,
    plan_move,
    plan_reparent,
    sibling_group,
)

__all__ = [
    "ANY_SLOT", "assemble", "build_children_index", "build_tree", "compute_depths",
    "find_duplicate_positions", "find_orphans", "flatten_tree", "get_block_path",
    "get_children", "get_descendants", "select_by_slot", "select_by_type",
    "apply_patches", "can_move_left", "can_move_right", "normalize_positions",
    "plan_drop", "plan_move", "plan_reparent", "sibling_group",
]
