"""
TreeAssembler — reconstruit l'ordre de rendu depuis les lignes plates.

Clé de groupe : (parent_block_id, slot), None et "" équivalents.
Tri stable par position (égalités → ordre de la collection).
Parcours en profondeur préfixe : racines à depth 0, enfants à depth+1.

Un nœud dont le parent n'existe pas n'est jamais atteint : il n'apparaît pas
dans la sortie (find_orphans permet une validation stricte).
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.schemas import AssembledNode, BlockNode, TreeNode
from ..registry import BlockRegistry

log = logging.getLogger(__name__)


class _AnySlot:
    """Sentinelle : pas de contrainte de slot."""

    def __repr__(self) -> str:
        return "ANY_SLOT"


ANY_SLOT: Any = _AnySlot()

GroupKey = Tuple[Optional[str], Optional[str]]
SlotFilter = Callable[[BlockNode], Any]


# ── Normalisation ───────────────────────────────────────────────────────────

def _key(value: Optional[str]) -> Optional[str]:
    """None et "" désignent tous deux "pas de parent" / "pas de slot"."""
    return value or None


def group_key(node: BlockNode) -> GroupKey:
    return _key(node.parent_block_id), _key(node.slot)


def as_nodes(nodes: Iterable[Any]) -> List[BlockNode]:
    """Accepte BlockNode, AssembledNode, TreeNode ou dict (ligne brute)."""
    rows: List[BlockNode] = []
    for item in nodes:
        if isinstance(item, BlockNode):
            rows.append(item)
        elif isinstance(item, (AssembledNode, TreeNode)):
            rows.append(item.node)
        else:
            rows.append(BlockNode.model_validate(item))
    return rows


def sort_by_position(nodes: Iterable[BlockNode]) -> List[BlockNode]:
    # sorted() est stable : les positions égales gardent l'ordre d'origine
    return sorted(nodes, key=lambda n: n.position)


# ── Index ───────────────────────────────────────────────────────────────────

def build_children_index(nodes: Iterable[Any]) -> Dict[GroupKey, List[BlockNode]]:
    """{(parent, slot): [frères triés par position]}."""
    groups: Dict[GroupKey, List[BlockNode]] = defaultdict(list)
    for node in as_nodes(nodes):
        groups[group_key(node)].append(node)
    return {key: sort_by_position(group) for key, group in groups.items()}


def get_children(nodes: Iterable[Any], parent_id: Optional[str], slot: Any = ANY_SLOT) -> List[BlockNode]:
    """Enfants directs d'un parent (None = racines), filtrés par slot si demandé."""
    parent_key = _key(parent_id)
    return sort_by_position(
        n for n in as_nodes(nodes)
        if _key(n.parent_block_id) == parent_key and (slot is ANY_SLOT or _key(n.slot) == _key(slot))
    )


# ── Assemblage ──────────────────────────────────────────────────────────────

def assemble(
    nodes: Iterable[Any],
    root_parent_id: Optional[str] = None,
    root_slot: Any = ANY_SLOT,
    registry: Optional[BlockRegistry] = None,
    slot_filter: Optional[SlotFilter] = None,
) -> List[AssembledNode]:
    """
    Séquence ordonnée prête au rendu (parent avant enfants, frères par position).

    Args:
        nodes: collection plate de blocs
        root_parent_id: parent de départ (None = racine de page)
        root_slot: slot de départ (ANY_SLOT = tous)
        registry: si fourni, les types inconnus sont marqués degraded
        slot_filter: slot à suivre pour les enfants d'un nœud (défaut : aucun filtre)

    Returns:
        Liste d'AssembledNode avec profondeur explicite
    """
    rows = as_nodes(nodes)
    by_parent: Dict[Optional[str], List[BlockNode]] = defaultdict(list)
    for node in rows:
        by_parent[_key(node.parent_block_id)].append(node)

    result: List[AssembledNode] = []
    visited = {root_parent_id} if root_parent_id else set()

    def walk(parent_id: Optional[str], slot: Any, depth: int) -> None:
        group = [
            n for n in by_parent.get(_key(parent_id), [])
            if slot is ANY_SLOT or _key(n.slot) == _key(slot)
        ]
        for node in sort_by_position(group):
            if node.id in visited:
                log.warning("Cycle détecté sur le bloc %s (parent %s), ignoré", node.id, parent_id)
                continue
            visited.add(node.id)
            degraded = registry is not None and not registry.is_known(node.block_type)
            result.append(AssembledNode(node=node, depth=depth, degraded=degraded))
            walk(node.id, slot_filter(node) if slot_filter else ANY_SLOT, depth + 1)

    walk(root_parent_id, root_slot, 0)
    return result


def build_tree(
    nodes: Iterable[Any],
    root_parent_id: Optional[str] = None,
    root_slot: Any = ANY_SLOT,
    slot_filter: Optional[SlotFilter] = None,
) -> List[TreeNode]:
    """Même parcours qu'assemble(), restitué en arbre imbriqué (children)."""
    roots: List[TreeNode] = []
    stack: List[TreeNode] = []
    for item in assemble(nodes, root_parent_id, root_slot, slot_filter=slot_filter):
        tree_node = TreeNode(node=item.node, depth=item.depth)
        while stack and stack[-1].depth >= item.depth:
            stack.pop()
        (stack[-1].children if stack else roots).append(tree_node)
        stack.append(tree_node)
    return roots


def flatten_tree(tree: Iterable[TreeNode]) -> List[AssembledNode]:
    """Inverse de build_tree : parcours préfixe des TreeNode."""
    flat: List[AssembledNode] = []
    for tree_node in tree:
        flat.append(AssembledNode(node=tree_node.node, depth=tree_node.depth))
        flat.extend(flatten_tree(tree_node.children))
    return flat


# ── Requêtes ────────────────────────────────────────────────────────────────

def find_orphans(nodes: Iterable[Any]) -> List[BlockNode]:
    """Blocs inatteignables depuis la racine : parent inexistant, auto-parent ou cycle."""
    rows = as_nodes(nodes)
    reachable = {item.id for item in assemble(rows)}
    return [n for n in rows if n.id not in reachable]


def find_duplicate_positions(nodes: Iterable[Any]) -> Dict[GroupKey, List[Any]]:
    """Positions présentes plusieurs fois dans un même groupe (non corrigées automatiquement)."""
    duplicates: Dict[GroupKey, List[Any]] = {}
    for key, group in build_children_index(nodes).items():
        seen, dups = set(), []
        for node in group:
            if node.position in seen and node.position not in dups:
                dups.append(node.position)
            seen.add(node.position)
        if dups:
            duplicates[key] = dups
    return duplicates


def get_descendants(nodes: Iterable[Any], block_id: str) -> List[BlockNode]:
    """Descendants d'un bloc en ordre de rendu (sans le bloc lui-même)."""
    return [item.node for item in assemble(nodes, root_parent_id=block_id)]


def get_block_path(nodes: Iterable[Any], block_id: str) -> List[BlockNode]:
    """Chemin racine → bloc (fil d'Ariane). Bloc inconnu → []."""
    by_id = {n.id: n for n in as_nodes(nodes)}
    path: List[BlockNode] = []
    seen = set()
    current = by_id.get(block_id)
    while current is not None and current.id not in seen:
        seen.add(current.id)
        path.append(current)
        current = by_id.get(current.parent_block_id) if current.parent_block_id else None
    path.reverse()
    return path


def compute_depths(nodes: Iterable[Any]) -> Dict[str, int]:
    """{id: profondeur} pour tous les blocs atteignables."""
    return {item.id: item.depth for item in assemble(nodes)}


def select_by_type(nodes: Iterable[Any], block_type: str) -> List[BlockNode]:
    return [item.node for item in assemble(nodes) if item.node.block_type == block_type]


def select_by_slot(nodes: Iterable[Any], slot: str) -> List[BlockNode]:
    return [item.node for item in assemble(nodes) if _key(item.node.slot) == _key(slot)]
