"""
Registry des types de blocs — lookup de capacités par clé string.

Le moteur n'a besoin que de savoir si un type est connu (nœud "dégradé" sinon)
et quels enfants un conteneur accepte. Le rendu reste hors du moteur.
"""
from typing import Dict, Iterator, List, Optional
from pydantic import BaseModel, Field


class BlockTypeSpec(BaseModel):
    """Capacités déclarées d'un type de bloc."""
    block_type: str
    name: str = ""
    allowed_children: Optional[List[str]] = Field(
        default=None,
        description="None = pas de restriction ; [] = n'accepte aucun enfant",
    )
    slots: List[str] = Field(default_factory=list)


class BlockRegistry:
    """
    Registry mutable côté appelant, lu par l'assembleur et le planificateur.

    Usage:
        >>> registry = BlockRegistry()
        >>> registry.register(BlockTypeSpec(block_type="heading", allowed_children=[]))
        >>> "heading" in registry
        True
    """

    def __init__(self, specs: Optional[List[BlockTypeSpec]] = None):
        self._specs: Dict[str, BlockTypeSpec] = {}
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: BlockTypeSpec) -> None:
        self._specs[spec.block_type] = spec

    def get(self, block_type: str) -> Optional[BlockTypeSpec]:
        return self._specs.get(block_type)

    def is_known(self, block_type: str) -> bool:
        return block_type in self._specs

    def allows_child(self, parent_type: str, child_type: str) -> bool:
        """Un parent inconnu ou sans restriction accepte tout."""
        spec = self._specs.get(parent_type)
        if spec is None or spec.allowed_children is None:
            return True
        return child_type in spec.allowed_children

    def __contains__(self, block_type: object) -> bool:
        return block_type in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)


_ATOMIC = ["heading", "paragraph", "single_image", "single_button", "icon", "spacer"]


def default_registry() -> BlockRegistry:
    """Types de blocs de l'éditeur (atomiques + conteneurs)."""
    return BlockRegistry([
        BlockTypeSpec(block_type="heading",       name="Titre",       allowed_children=[]),
        BlockTypeSpec(block_type="paragraph",     name="Paragraphe",  allowed_children=[]),
        BlockTypeSpec(block_type="single_image",  name="Image",       allowed_children=[]),
        BlockTypeSpec(block_type="single_button", name="Bouton",      allowed_children=[]),
        BlockTypeSpec(block_type="icon",          name="Icône",       allowed_children=[]),
        BlockTypeSpec(block_type="spacer",        name="Espacement",  allowed_children=[]),
        BlockTypeSpec(block_type="container",     name="Conteneur",   slots=["default"]),
        BlockTypeSpec(block_type="section",       name="Section",     slots=["default"]),
        BlockTypeSpec(block_type="columns",       name="Colonnes",    slots=["column1", "column2", "column3"]),
        BlockTypeSpec(block_type="tabs",          name="Onglets",     slots=["tab-1", "tab-2", "tab-3"]),
        BlockTypeSpec(block_type="accordion",     name="Accordéon",   allowed_children=_ATOMIC, slots=["item-1", "item-2"]),
    ])
