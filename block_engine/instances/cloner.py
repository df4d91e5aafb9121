"""
InstantiationCloner — matérialise un template en nouveaux blocs.

- un nouvel id par nœud (fabrique injectable, uuid4 par défaut), correspondance ancien → nouveau
- parent_block_id réécrit via la correspondance ; la racine prend le parent cible de l'appelant
- instance_id posé sur la racine uniquement (référence au template), None sur les descendants
- aucun override copié : une instance neuve affiche le contenu brut du template
"""
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.schemas import BlockInstance, BlockNode, CloneResult, ReusableBlock, TreeNode
from ..errors import IdCollisionError
from ..tree.assembler import as_nodes, assemble, flatten_tree

log = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def _new_uuid() -> str:
    return str(uuid.uuid4())


def _rows(template_subtree: Iterable[Any]) -> List[BlockNode]:
    items = list(template_subtree)
    if any(isinstance(i, TreeNode) for i in items):
        items = flatten_tree(items)
    return as_nodes(items)


def clone(
    template_subtree: Iterable[Any],
    template_id: Optional[str] = None,
    parent_block_id: Optional[str] = None,
    slot: Optional[str] = None,
    position: Optional[Any] = None,
    id_factory: Optional[IdFactory] = None,
) -> Tuple[List[BlockNode], Dict[str, str]]:
    """
    Clone un sous-arbre de template.

    Args:
        template_subtree: nœuds du template (racine + descendants, ordre quelconque)
        template_id: id du ReusableBlock référencé par instance_id (défaut : id de la racine)
        parent_block_id / slot: emplacement cible de la racine
        position: position de la racine (défaut : celle du template)
        id_factory: générateur d'ids (tests : compteur déterministe)

    Returns:
        (blocs clonés en ordre de parcours, {ancien id: nouvel id})

    Raises:
        ValueError: sous-arbre sans racine unique
        IdCollisionError: la fabrique a rendu un id déjà présent
    """
    rows = _rows(template_subtree)
    if not rows:
        return [], {}

    source_ids = {n.id for n in rows}
    roots = [n for n in rows if not n.parent_block_id or n.parent_block_id not in source_ids]
    if len(roots) != 1:
        raise ValueError(f"Le sous-arbre doit avoir exactement une racine ({len(roots)} trouvée(s))")
    root = roots[0]

    ordered = [root] + [item.node for item in assemble(rows, root_parent_id=root.id)]
    if len(ordered) < len(rows):
        log.warning("clone : %d bloc(s) inatteignable(s) depuis %s ignoré(s)", len(rows) - len(ordered), root.id)

    factory = id_factory or _new_uuid
    id_map: Dict[str, str] = {}
    cloned: List[BlockNode] = []

    for node in ordered:
        new_id = factory()
        if new_id in source_ids or new_id in id_map.values():
            raise IdCollisionError(new_id)
        id_map[node.id] = new_id

        copy = node.model_copy(deep=True)
        if node is root:
            update = {
                "id": new_id,
                "parent_block_id": parent_block_id,
                "slot": slot,
                "position": node.position if position is None else position,
                "instance_id": template_id or root.id,
            }
        else:
            update = {
                "id": new_id,
                "parent_block_id": id_map[node.parent_block_id],
                "instance_id": None,
            }
        cloned.append(copy.model_copy(update=update))

    log.debug("clone %s : %d bloc(s) sous %s", template_id or root.id, len(cloned), parent_block_id)
    return cloned, id_map


def instantiate(
    template: ReusableBlock,
    parent_block_id: Optional[str] = None,
    slot: Optional[str] = None,
    position: Optional[Any] = None,
    id_factory: Optional[IdFactory] = None,
) -> CloneResult:
    """
    Instancie un ReusableBlock : blocs clonés + enregistrement BlockInstance (overrides vides).
    """
    root = template.root
    if root is None:
        raise ValueError(f"Bloc racine {template.root_block_id!r} absent du template {template.id!r}")

    subtree = [root] + [item.node for item in assemble(template.blocks, root_parent_id=root.id)]
    blocks, id_map = clone(
        subtree,
        template_id=template.id,
        parent_block_id=parent_block_id,
        slot=slot,
        position=position,
        id_factory=id_factory,
    )
    factory = id_factory or _new_uuid
    record_id = factory()
    if record_id in id_map or record_id in id_map.values():
        raise IdCollisionError(record_id)
    instance = BlockInstance(
        id=record_id,
        reusable_block_id=template.id,
        parent_block_id=parent_block_id,
        slot=slot,
        position=blocks[0].position,
    )
    log.info("Template %s instancié (%d blocs)", template.id, len(blocks))
    return CloneResult(blocks=blocks, id_map=id_map, instance=instance)
