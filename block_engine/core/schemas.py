"""
Schémas Pydantic du moteur de blocs.
Une page = liste plate de BlockNode (parent_block_id / slot / position).

Le moteur ne lit que les champs structurels ; content et metadata sont opaques
sauf pour la résolution des overrides.
"""
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

Position = Union[int, float]


class BlockNode(BaseModel):
    """Ligne de bloc telle que persistée (layout_blocks)."""
    model_config = ConfigDict(extra="allow")

    id: str
    block_type: str = ""
    content: Optional[Dict[str, Any]] = Field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)
    parent_block_id: Optional[str] = None
    slot: Optional[str] = None
    position: Position = 0
    status: str = "draft"
    instance_id: Optional[str] = None
    page_id: Optional[str] = None

    @field_validator("position", mode="before")
    @classmethod
    def _null_position(cls, v):
        # position NULL en base → 0 (comportement de l'éditeur)
        return 0 if v is None else v

    @property
    def is_root(self) -> bool:
        return not self.parent_block_id

    @property
    def is_instance(self) -> bool:
        return bool(self.instance_id)


class AssembledNode(BaseModel):
    """Nœud émis par l'assembleur : ordre de rendu + profondeur explicite."""
    node: BlockNode
    depth: int = 0
    degraded: bool = Field(default=False, description="block_type absent du registry")

    @property
    def id(self) -> str:
        return self.node.id


class TreeNode(BaseModel):
    """Représentation imbriquée (children) d'un bloc."""
    node: BlockNode
    depth: int = 0
    children: List["TreeNode"] = Field(default_factory=list)


TreeNode.model_rebuild()


class PositionPatch(BaseModel):
    """Changement à persister pour un bloc déplacé ou décalé."""
    id: str
    position: Position
    reparent: bool = False
    parent_block_id: Optional[str] = None
    slot: Optional[str] = None


class ReusableBlock(BaseModel):
    """Template réutilisable : sous-arbre nommé avec un bloc racine désigné."""
    id: str
    name: str = ""
    description: Optional[str] = None
    category: str = "general"
    tags: List[str] = Field(default_factory=list)
    version: int = 1
    root_block_id: str
    blocks: List[BlockNode] = Field(default_factory=list)

    @property
    def root(self) -> Optional[BlockNode]:
        return next((b for b in self.blocks if b.id == self.root_block_id), None)


class BlockInstance(BaseModel):
    """Instance d'un template sur une page ; overrides indexés par id de nœud du template."""
    id: str
    reusable_block_id: str
    parent_block_id: Optional[str] = None
    slot: Optional[str] = None
    position: Position = 0
    overrides: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class CloneResult(BaseModel):
    """Résultat d'une instanciation : nouveaux blocs + correspondance ancien id → nouvel id."""
    blocks: List[BlockNode]
    id_map: Dict[str, str]
    instance: Optional[BlockInstance] = None

    @property
    def root(self) -> BlockNode:
        return self.blocks[0]


class DropTarget(BaseModel):
    """Cible de dépôt décodée : (parent, slot, index). index=None → ajout en fin."""
    kind: Literal["slot", "canvas"] = "canvas"
    parent_block_id: Optional[str] = None
    slot: Optional[str] = None
    index: Optional[int] = None
