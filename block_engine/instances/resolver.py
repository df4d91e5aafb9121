"""
InstanceResolver — contenu effectif d'une instance de bloc réutilisable.

Pour chaque nœud du template :
    content  effectif = merge_overrides(node.content,  overrides["content.*"])
    metadata effectif = merge_overrides(node.metadata, overrides["metadata.*"])

Les champs structurels (id, parent_block_id, slot, position, block_type) ne
sont jamais surchargeables. La forme de l'arbre du template est conservée.
Le template n'est jamais modifié : deux instances du même template sont indépendantes.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..core.merge import OVERRIDABLE_FIELDS, diff_overrides, merge_overrides, split_overrides
from ..core.paths import SEPARATOR, remove_override
from ..core.schemas import AssembledNode, BlockNode, TreeNode
from ..errors import InvalidOverrideError

log = logging.getLogger(__name__)

OverridesByNode = Dict[str, Dict[str, Any]]


def resolve_node(node: BlockNode, overrides: Optional[Dict[str, Any]]) -> BlockNode:
    """Copie du nœud avec content/metadata effectifs. Sans override, le champ garde sa référence."""
    if not overrides:
        return node.model_copy()

    content_paths, metadata_paths, _ = split_overrides(overrides)
    update: Dict[str, Any] = {}
    if content_paths:
        update["content"] = merge_overrides(node.content, content_paths)
    if metadata_paths:
        update["metadata"] = merge_overrides(node.metadata, metadata_paths)
    return node.model_copy(update=update)


def _resolve_item(item: Any, overrides_by_node: OverridesByNode) -> Any:
    if isinstance(item, TreeNode):
        return TreeNode(
            node=resolve_node(item.node, overrides_by_node.get(item.node.id)),
            depth=item.depth,
            children=[_resolve_item(child, overrides_by_node) for child in item.children],
        )
    if isinstance(item, AssembledNode):
        return item.model_copy(update={"node": resolve_node(item.node, overrides_by_node.get(item.node.id))})
    node = item if isinstance(item, BlockNode) else BlockNode.model_validate(item)
    return resolve_node(node, overrides_by_node.get(node.id))


def resolve_instance(template_subtree: Iterable[Any], overrides_by_node: Optional[OverridesByNode]) -> List[Any]:
    """
    Sous-arbre effectif d'une instance.

    Args:
        template_subtree: nœuds du template (BlockNode, AssembledNode ou TreeNode imbriqués)
        overrides_by_node: {id du nœud: {chemin: valeur}} ; nœud absent → aucun override

    Returns:
        Même forme et même ordre que l'entrée, seuls content/metadata diffèrent
    """
    overrides_by_node = overrides_by_node or {}
    items = list(template_subtree)

    unknown = set(overrides_by_node) - _collect_ids(items)
    if unknown:
        log.debug("Overrides pour des nœuds absents du template : %s", sorted(unknown))

    return [_resolve_item(item, overrides_by_node) for item in items]


def _collect_ids(items: Iterable[Any]) -> set:
    ids = set()
    for item in items:
        if isinstance(item, TreeNode):
            ids.add(item.node.id)
            ids |= _collect_ids(item.children)
        elif isinstance(item, AssembledNode):
            ids.add(item.node.id)
        elif isinstance(item, BlockNode):
            ids.add(item.id)
        elif isinstance(item, dict):
            ids.add(item.get("id"))
    return ids


# ── Édition des overrides (retourne toujours une nouvelle map) ──────────────

def _check_path(path: str) -> None:
    field, _, rest = path.partition(SEPARATOR)
    if field not in OVERRIDABLE_FIELDS or not rest:
        raise InvalidOverrideError(path)


def set_instance_override(overrides_by_node: Optional[OverridesByNode], node_id: str,
                          path: str, value: Any) -> OverridesByNode:
    """Pose un override "content.x" / "metadata.x" pour un nœud de l'instance."""
    _check_path(path)
    result = dict(overrides_by_node or {})
    node_overrides = dict(result.get(node_id) or {})
    node_overrides[path] = value
    result[node_id] = node_overrides
    return result


def remove_instance_override(overrides_by_node: Optional[OverridesByNode], node_id: str,
                             path: str) -> OverridesByNode:
    """Retire un override ; une map de nœud vidée disparaît."""
    result = dict(overrides_by_node or {})
    if node_id not in result:
        return result
    node_overrides = remove_override(result[node_id], path)
    if node_overrides:
        result[node_id] = node_overrides
    else:
        del result[node_id]
    return result


def reset_node_overrides(overrides_by_node: Optional[OverridesByNode], node_id: str) -> OverridesByNode:
    """Retour au contenu du template pour un nœud."""
    return {k: v for k, v in (overrides_by_node or {}).items() if k != node_id}


def overrides_from_edit(template_node: BlockNode, edited: BlockNode) -> Dict[str, Any]:
    """Overrides minimaux qui reproduisent l'édition de content/metadata d'un nœud."""
    result: Dict[str, Any] = {}
    for field in OVERRIDABLE_FIELDS:
        result.update(diff_overrides(getattr(template_node, field), getattr(edited, field), prefix=field))
    return result


def remap_overrides(overrides_by_node: Optional[OverridesByNode], id_map: Dict[str, str]) -> OverridesByNode:
    """Ré-indexe les overrides (ids du template) sur les ids d'une copie matérialisée."""
    result: OverridesByNode = {}
    for node_id, node_overrides in (overrides_by_node or {}).items():
        new_id = id_map.get(node_id)
        if new_id is None:
            log.warning("remap_overrides : nœud %s absent de la correspondance d'ids, ignoré", node_id)
            continue
        result[new_id] = dict(node_overrides)
    return result


def is_instance_root(node: BlockNode) -> bool:
    return bool(node.instance_id)


def find_instance_roots(nodes: Iterable[BlockNode]) -> List[BlockNode]:
    return [n for n in nodes if is_instance_root(n)]
