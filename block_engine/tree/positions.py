"""
PositionPlanner — calcule les patchs de position pour un déplacement de bloc.

- plan_move     : échange de position avec le voisin immédiat (gauche/droite)
- plan_reparent : insertion à un index dans un groupe (parent, slot), éventuellement nouveau
- plan_drop     : plan_reparent depuis une cible de dépôt décodée

Les patchs ne sont jamais appliqués : l'appelant les persiste (apply_patches
produit la vue locale mise à jour).
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Literal, Optional

from ..config import get_settings
from ..core.schemas import BlockNode, DropTarget, PositionPatch
from ..errors import BlockNotInGroupError, InvalidMoveError
from ..registry import BlockRegistry
from .assembler import _key, as_nodes, get_descendants, group_key, sort_by_position

log = logging.getLogger(__name__)

Direction = Literal["left", "right"]


def _num(value: float) -> Any:
    """3.0 → 3 : garde des positions entières quand le pas est entier."""
    return int(value) if float(value).is_integer() else value


def _index_of(node: BlockNode, siblings: List[BlockNode]) -> int:
    return next((i for i, s in enumerate(siblings) if s.id == node.id), -1)


def _changed(ordered: List[BlockNode], positions: List[Any]) -> List[PositionPatch]:
    return [
        PositionPatch(id=n.id, position=_num(p))
        for n, p in zip(ordered, positions)
        if n.position != p
    ]


# ── Groupes de frères ───────────────────────────────────────────────────────

def sibling_group(node: BlockNode, nodes: Iterable[Any], by_page: bool = False) -> List[BlockNode]:
    """
    Frères du bloc (lui compris), triés par position.

    Args:
        by_page: regroupe par page_id au lieu de (parent, slot), pour les listes sans slot
    """
    rows = as_nodes(nodes)
    if by_page:
        group = [n for n in rows if n.page_id == node.page_id]
    else:
        key = group_key(node)
        group = [n for n in rows if group_key(n) == key]
    return sort_by_position(group)


def can_move_left(node: BlockNode, siblings: Iterable[Any]) -> bool:
    return _index_of(node, sort_by_position(as_nodes(siblings))) > 0


def can_move_right(node: BlockNode, siblings: Iterable[Any]) -> bool:
    ordered = sort_by_position(as_nodes(siblings))
    index = _index_of(node, ordered)
    return 0 <= index < len(ordered) - 1


def normalize_positions(siblings: Iterable[Any], step: Optional[float] = None) -> List[PositionPatch]:
    """Renumérotation 0, step, 2·step… ; ne retourne que les blocs dont la position change."""
    step = step or get_settings().position_step
    ordered = sort_by_position(as_nodes(siblings))
    return _changed(ordered, [i * step for i in range(len(ordered))])


# ── Déplacement gauche / droite ─────────────────────────────────────────────

def plan_move(node: BlockNode, siblings: Iterable[Any], direction: Direction,
              step: Optional[float] = None) -> List[PositionPatch]:
    """
    Échange la position du bloc avec celle de son voisin.

    Bord atteint → []. Bloc absent de siblings → BlockNotInGroupError.
    Positions égales : l'échange serait sans effet, le groupe est renuméroté dans le nouvel ordre.
    """
    if direction not in ("left", "right"):
        raise ValueError(f"direction invalide : {direction!r}")

    ordered = sort_by_position(as_nodes(siblings))
    index = _index_of(node, ordered)
    if index < 0:
        raise BlockNotInGroupError(node.id)

    target = index - 1 if direction == "left" else index + 1
    if target < 0 or target >= len(ordered):
        return []

    current, neighbor = ordered[index], ordered[target]
    if current.position != neighbor.position:
        return [
            PositionPatch(id=current.id, position=neighbor.position),
            PositionPatch(id=neighbor.id, position=current.position),
        ]

    log.debug("plan_move : positions égales (%s), renumérotation du groupe", current.position)
    ordered[index], ordered[target] = neighbor, current
    step = step or get_settings().position_step
    return _changed(ordered, [i * step for i in range(len(ordered))])


# ── Changement de parent / slot ─────────────────────────────────────────────

def _check_target(moving: BlockNode, rows: List[BlockNode], new_parent_id: Optional[str],
                  new_slot: Optional[str], registry: Optional[BlockRegistry]) -> None:
    if not new_parent_id:
        return
    if new_parent_id == moving.id:
        raise InvalidMoveError("Impossible de déplacer un bloc dans lui-même")

    parent = next((n for n in rows if n.id == new_parent_id), None)
    if parent is None:
        raise InvalidMoveError(f"Parent inconnu : {new_parent_id!r}")
    if any(d.id == new_parent_id for d in get_descendants(rows, moving.id)):
        raise InvalidMoveError("Impossible de déplacer un bloc dans son propre descendant")
    if registry is not None and not registry.allows_child(parent.block_type, moving.block_type):
        raise InvalidMoveError(
            f"Bloc de type {moving.block_type!r} non autorisé dans {parent.block_type!r}"
        )
    type_spec = registry.get(parent.block_type) if registry is not None else None
    if type_spec is not None and type_spec.slots and new_slot and new_slot not in type_spec.slots:
        raise InvalidMoveError(f"Slot {new_slot!r} inexistant pour le type {parent.block_type!r}")


def plan_reparent(
    node: BlockNode,
    nodes: Iterable[Any],
    new_parent_id: Optional[str],
    new_slot: Optional[str],
    target_index: Optional[int],
    registry: Optional[BlockRegistry] = None,
    policy: Optional[str] = None,
    step: Optional[float] = None,
) -> List[PositionPatch]:
    """
    Place le bloc à target_index dans le groupe (new_parent_id, new_slot).

    target_index est l'index final du bloc dans le groupe (le bloc lui-même exclu
    du calcul) ; None, négatif ou au-delà de la fin → ajout en fin.

    Politiques :
        "shift"    : position = précédent + step (ou suivant − step), puis décalage
                     des suivants seulement tant que l'ordre strict n'est pas respecté
        "renumber" : tout le groupe cible reçoit 0, step, 2·step…

    Returns:
        Patch du bloc déplacé en premier (reparent=True), puis les frères modifiés
    """
    if policy is None or step is None:
        settings = get_settings()
        policy = policy or settings.position_policy
        step = step or settings.position_step
    if policy not in ("shift", "renumber"):
        raise ValueError(f"politique de position invalide : {policy!r}")

    rows = as_nodes(nodes)
    moving = next((n for n in rows if n.id == node.id), node)
    _check_target(moving, rows, new_parent_id, new_slot, registry)

    new_key = (_key(new_parent_id), _key(new_slot))
    group = sort_by_position(n for n in rows if group_key(n) == new_key and n.id != moving.id)

    index = len(group) if target_index is None or not 0 <= target_index <= len(group) else target_index
    ordered = group[:index] + [moving] + group[index:]

    if policy == "renumber":
        positions = [i * step for i in range(len(ordered))]
    else:
        positions = [n.position for n in ordered]
        if index > 0:
            positions[index] = positions[index - 1] + step
        elif len(ordered) > 1:
            positions[index] = positions[1] - step
        else:
            positions[index] = 0
        for j in range(index + 1, len(ordered)):
            if positions[j] <= positions[j - 1]:
                positions[j] = positions[j - 1] + step

    moved = PositionPatch(
        id=moving.id,
        position=_num(positions[index]),
        reparent=True,
        parent_block_id=new_key[0],
        slot=new_key[1],
    )
    siblings = _changed(ordered[:index] + ordered[index + 1:], positions[:index] + positions[index + 1:])
    log.debug("plan_reparent %s → (%s, %s) index %d : %d frère(s) décalé(s)",
              moving.id, new_key[0], new_key[1], index, len(siblings))
    return [moved] + siblings


def plan_drop(
    node: BlockNode,
    nodes: Iterable[Any],
    target: DropTarget,
    registry: Optional[BlockRegistry] = None,
    policy: Optional[str] = None,
    step: Optional[float] = None,
) -> List[PositionPatch]:
    """plan_reparent depuis une DropTarget (voir dropzone.parse_drop_target)."""
    if target.kind == "canvas":
        return plan_reparent(node, nodes, None, None, target.index, registry=registry, policy=policy, step=step)
    return plan_reparent(node, nodes, target.parent_block_id, target.slot, target.index,
                         registry=registry, policy=policy, step=step)


# ── Application locale ──────────────────────────────────────────────────────

def apply_patches(nodes: Iterable[Any], patches: Iterable[PositionPatch]) -> List[BlockNode]:
    """Nouvelle liste de blocs avec les patchs appliqués (les entrées ne sont pas modifiées)."""
    by_id = {p.id: p for p in patches}
    result: List[BlockNode] = []
    for node in as_nodes(nodes):
        patch = by_id.get(node.id)
        if patch is None:
            result.append(node)
            continue
        update: dict = {"position": patch.position}
        if patch.reparent:
            update.update(parent_block_id=patch.parent_block_id, slot=patch.slot)
        result.append(node.model_copy(update=update))
    return result
