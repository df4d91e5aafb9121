"""
Block Engine v0.1 — arbre de blocs et résolution des overrides pour le page builder.

Usage (rendu) :
    >>> from block_engine import assemble
    >>> for item in assemble(rows):
    ...     print("  " * item.depth, item.node.block_type)

Usage (instances) :
    >>> from block_engine import instantiate, resolve_instance
    >>> result = instantiate(template, parent_block_id="section-1")
    >>> effective = resolve_instance(template.blocks, {"T": {"content.title": "Bye"}})

Usage (drag-and-drop) :
    >>> from block_engine import parse_drop_target, plan_drop
    >>> patches = plan_drop(block, rows, parse_drop_target("slot:tabs-1:tab-2:0"))
"""

# ── Schémas ─────────────────────────────────────────────────────────────────
from .core.schemas import (
    BlockNode,
    AssembledNode,
    TreeNode,
    PositionPatch,
    ReusableBlock,
    BlockInstance,
    CloneResult,
    DropTarget,
)

# ── PathStore / OverrideMerger ──────────────────────────────────────────────
from .core.paths import get_path, set_path, has_override, remove_override
from .core.merge import merge_overrides, split_overrides, diff_overrides

# ── Arbre ───────────────────────────────────────────────────────────────────
from .tree import (
    ANY_SLOT,
    assemble,
    build_children_index,
    build_tree,
    flatten_tree,
    find_orphans,
    find_duplicate_positions,
    get_block_path,
    get_children,
    get_descendants,
    compute_depths,
    select_by_type,
    select_by_slot,
    sibling_group,
    can_move_left,
    can_move_right,
    plan_move,
    plan_reparent,
    plan_drop,
    normalize_positions,
    apply_patches,
)

# ── Instances ───────────────────────────────────────────────────────────────
from .instances import (
    resolve_instance,
    resolve_node,
    set_instance_override,
    remove_instance_override,
    reset_node_overrides,
    overrides_from_edit,
    remap_overrides,
    clone,
    instantiate,
    TemplateSnapshot,
    create_reusable_block,
    parse_snapshot,
)

# ── Registry / drop / erreurs ───────────────────────────────────────────────
from .registry import BlockRegistry, BlockTypeSpec, default_registry
from .dropzone import parse_drop_target, format_drop_target
from .errors import (
    BlockEngineError,
    BlockNotInGroupError,
    InvalidMoveError,
    InvalidOverrideError,
    IdCollisionError,
)

__version__ = "0.1.0"

__all__ = [
    # schémas
    "BlockNode", "AssembledNode", "TreeNode", "PositionPatch",
    "ReusableBlock", "BlockInstance", "CloneResult", "DropTarget",
    # chemins / fusion
    "get_path", "set_path", "has_override", "remove_override",
    "merge_overrides", "split_overrides", "diff_overrides",
    # arbre
    "ANY_SLOT", "assemble", "build_children_index", "build_tree", "flatten_tree",
    "find_orphans", "find_duplicate_positions", "get_block_path", "get_children",
    "get_descendants", "compute_depths", "select_by_type", "select_by_slot",
    # positions
    "sibling_group", "can_move_left", "can_move_right", "plan_move",
    "plan_reparent", "plan_drop", "normalize_positions", "apply_patches",
    # instances
    "resolve_instance", "resolve_node", "set_instance_override", "remove_instance_override",
    "reset_node_overrides", "overrides_from_edit", "remap_overrides",
    "clone", "instantiate", "TemplateSnapshot", "create_reusable_block", "parse_snapshot",
    # registry / drop / erreurs
    "BlockRegistry", "BlockTypeSpec", "default_registry",
    "parse_drop_target", "format_drop_target",
    "BlockEngineError", "BlockNotInGroupError", "InvalidMoveError",
    "InvalidOverrideError", "IdCollisionError",
]
