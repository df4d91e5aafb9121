"""Blocs réutilisables — résolution des overrides, clonage, snapshots."""
from .resolver import (
    resolve_instance,
    resolve_node,
    set_instance_override,
    remove_instance_override,
    reset_node_overrides,
    overrides_from_edit,
    remap_overrides,
    is_instance_root,
    find_instance_roots,
)
from .cloner import clone, instantiate
from .snapshot import TemplateSnapshot, create_reusable_block, create_snapshot, extract_subtree, parse_snapshot

__all__ = [
    "resolve_instance", "resolve_node",
    "set_instance_override", "remove_instance_override", "reset_node_overrides",
    "overrides_from_edit", "remap_overrides", "is_instance_root", "find_instance_roots",
    "clone", "instantiate",
    "TemplateSnapshot", "create_reusable_block", "create_snapshot", "extract_subtree", "parse_snapshot",
]
