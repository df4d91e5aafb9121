"""Core module pour block_engine : schémas, chemins pointés, fusion d'overrides."""
from .schemas import (
    BlockNode,
    AssembledNode,
    TreeNode,
    PositionPatch,
    ReusableBlock,
    BlockInstance,
    CloneResult,
    DropTarget,
)
from .paths import get_path, set_path, has_override, remove_override, flatten_paths
from .merge import merge_overrides, split_overrides, diff_overrides

__all__ = [
    "BlockNode",
    "AssembledNode",
    "TreeNode",
    "PositionPatch",
    "ReusableBlock",
    "BlockInstance",
    "CloneResult",
    "DropTarget",
    "get_path",
    "set_path",
    "has_override",
    "remove_override",
    "flatten_paths",
    "merge_overrides",
    "split_overrides",
    "diff_overrides",
]
