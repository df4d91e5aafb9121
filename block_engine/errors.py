"""
Erreurs du moteur de blocs.

Les fonctions du moteur sont totales sur des entrées bien typées : les
problèmes de données (parent orphelin, positions dupliquées, type inconnu)
ne lèvent pas. Seuls les appels invalides lèvent une erreur "programmeur".
"""


class BlockEngineError(Exception):
    """Erreur de base du moteur."""


class BlockNotInGroupError(BlockEngineError, LookupError):
    """Le bloc n'appartient pas au groupe de frères fourni."""

    def __init__(self, block_id: str):
        super().__init__(f"Bloc {block_id!r} absent de son groupe de frères")
        self.block_id = block_id


class InvalidMoveError(BlockEngineError, ValueError):
    """Déplacement impossible (cycle, parent inconnu, enfant non autorisé)."""


class InvalidOverrideError(BlockEngineError, ValueError):
    """Chemin d'override hors de content.* / metadata.*."""

    def __init__(self, path: str):
        super().__init__(f"Chemin d'override non surchargeable : {path!r}")
        self.path = path


class IdCollisionError(BlockEngineError, ValueError):
    """La fabrique d'ids a produit un id déjà utilisé."""

    def __init__(self, block_id: str):
        super().__init__(f"Id déjà utilisé : {block_id!r}")
        self.block_id = block_id
