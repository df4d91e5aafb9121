"""
Snapshots de templates — format JSON {rootBlockId, blocks, createdAt}.

TemplateSnapshot → parse_snapshot() → ReusableBlock → instantiate()

Les blocs d'un snapshot peuvent être plats (parent_block_id) ou imbriqués
(clé "children") : les deux sont aplatis en BlockNode.
"""
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.schemas import BlockNode, ReusableBlock
from ..tree.assembler import as_nodes, assemble


class TemplateSnapshot(BaseModel):
    """Contenu versionné d'un ReusableBlock."""
    model_config = ConfigDict(populate_by_name=True)

    root_block_id: str = Field(..., alias="rootBlockId")
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: Optional[str] = Field(default=None, alias="createdAt")


def _flatten(raw_blocks: Iterable[Dict[str, Any]], parent_id: Optional[str] = None) -> List[BlockNode]:
    """Aplatit une liste de blocs éventuellement imbriqués (children)."""
    rows: List[BlockNode] = []
    for raw in raw_blocks:
        data = {k: v for k, v in raw.items() if k != "children"}
        if parent_id is not None and not data.get("parent_block_id"):
            data["parent_block_id"] = parent_id
        node = BlockNode.model_validate(data)
        rows.append(node)
        rows.extend(_flatten(raw.get("children") or [], node.id))
    return rows


def extract_subtree(nodes: Iterable[Any], root_block_id: str) -> List[BlockNode]:
    """Racine + descendants en ordre de rendu. Racine inconnue → []."""
    rows = as_nodes(nodes)
    root = next((n for n in rows if n.id == root_block_id), None)
    if root is None:
        return []
    return [root] + [item.node for item in assemble(rows, root_parent_id=root_block_id)]


def create_snapshot(nodes: Iterable[Any], root_block_id: str,
                    created_at: Optional[str] = None) -> TemplateSnapshot:
    """Snapshot plat du sous-arbre. created_at (ISO 8601) est fourni par l'appelant."""
    subtree = extract_subtree(nodes, root_block_id)
    if not subtree:
        raise ValueError(f"Bloc racine introuvable : {root_block_id!r}")
    return TemplateSnapshot(
        root_block_id=root_block_id,
        blocks=[n.model_dump() for n in subtree],
        created_at=created_at,
    )


def create_reusable_block(
    nodes: Iterable[Any],
    root_block_id: str,
    name: str,
    template_id: str,
    description: Optional[str] = None,
    category: str = "general",
    tags: Optional[List[str]] = None,
) -> ReusableBlock:
    """
    Crée un ReusableBlock depuis des blocs existants d'une page.

    Raises:
        ValueError: aucun bloc source, ou racine absente des blocs sources
    """
    rows = as_nodes(nodes)
    if not rows:
        raise ValueError("Aucun bloc source")
    subtree = extract_subtree(rows, root_block_id)
    if not subtree:
        raise ValueError(f"Bloc racine introuvable : {root_block_id!r}")
    return ReusableBlock(
        id=template_id,
        name=name,
        description=description,
        category=category,
        tags=tags or [],
        root_block_id=root_block_id,
        blocks=subtree,
    )


def parse_snapshot(
    data: Dict[str, Any],
    template_id: str,
    name: str = "",
    version: int = 1,
) -> ReusableBlock:
    """
    Convertit un snapshot JSON en ReusableBlock.

    1. Valide le format (rootBlockId obligatoire)
    2. Aplatit les blocs imbriqués
    3. Vérifie la présence du bloc racine
    """
    snapshot = TemplateSnapshot.model_validate(data)
    blocks = _flatten(snapshot.blocks)
    if not any(b.id == snapshot.root_block_id for b in blocks):
        raise ValueError(f"Bloc racine {snapshot.root_block_id!r} absent du snapshot")
    return ReusableBlock(
        id=template_id,
        name=name,
        version=version,
        root_block_id=snapshot.root_block_id,
        blocks=blocks,
    )
