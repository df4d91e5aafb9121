"""
Décodage des identifiants de zones de dépôt produits par l'éditeur drag-and-drop.

    slot:<parentBlockId>:<slotName>:<index>  → dépôt dans le slot d'un conteneur
    canvas-slot:<index>                      → dépôt au niveau racine, à l'index donné
    canvas-dropzone                          → dépôt sur le canevas, ajout en fin

Un index négatif (-1 = zone "après le dernier") signifie ajout en fin.
"""
import logging
import re
from typing import Optional

from .core.schemas import DropTarget

log = logging.getLogger(__name__)

_SLOT_RE   = re.compile(r"^slot:(.+):(.+):(-?\d+)$")
_CANVAS_RE = re.compile(r"^canvas-slot:(-?\d+)$")

CANVAS_DROPZONE = "canvas-dropzone"


def _index(raw: str) -> Optional[int]:
    value = int(raw)
    return value if value >= 0 else None


def parse_drop_target(over_id: object) -> Optional[DropTarget]:
    """
    Retourne la DropTarget décodée, ou None si l'identifiant n'est pas une zone de dépôt connue.
    """
    raw = str(over_id or "")

    match = _SLOT_RE.match(raw)
    if match:
        parent_id, slot, index = match.groups()
        return DropTarget(kind="slot", parent_block_id=parent_id, slot=slot, index=_index(index))

    match = _CANVAS_RE.match(raw)
    if match:
        return DropTarget(kind="canvas", index=_index(match.group(1)))

    if raw == CANVAS_DROPZONE:
        return DropTarget(kind="canvas")

    log.warning("Zone de dépôt inconnue : %r", raw)
    return None


def format_drop_target(target: DropTarget) -> str:
    """Inverse de parse_drop_target (index None → -1 pour un slot, canvas-dropzone pour le canevas)."""
    if target.kind == "slot":
        index = -1 if target.index is None else target.index
        return f"slot:{target.parent_block_id}:{target.slot}:{index}"
    if target.index is None:
        return CANVAS_DROPZONE
    return f"canvas-slot:{target.index}"
