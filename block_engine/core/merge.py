"""
OverrideMerger — applique une map d'overrides {chemin: valeur} sur un contenu de base.

Garanties :
  - base n'est jamais muté
  - un sous-arbre de base non touché par un chemin reste le même objet (détection de changement par référence)
  - les listes sont remplacées en bloc, jamais fusionnées
"""
import logging
from typing import Any, Dict, Optional, Tuple

from .paths import set_path, flatten_paths, SEPARATOR

log = logging.getLogger(__name__)

# Champs d'un bloc dont les feuilles peuvent être surchargées
OVERRIDABLE_FIELDS = ("content", "metadata")


def merge_overrides(base: Optional[dict], overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Contenu effectif = base + overrides.

    base absent      → overrides (ou {} si les deux sont absents)
    overrides absent → copie shallow de base
    sinon            → set_path successifs, dans l'ordre d'insertion des overrides
    """
    if base is None:
        return dict(overrides) if overrides else {}
    if overrides is None:
        return dict(base)

    result = dict(base)
    for path, value in overrides.items():
        result = set_path(result, path, value)
    return result


def split_overrides(overrides: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """
    Répartit une map d'overrides de nœud par champ cible.

    {"content.title": "Bye", "metadata.spacing.top": 8, "position": 3}
      → ({"title": "Bye"}, {"spacing.top": 8}, {"position": 3})

    Le troisième élément contient les chemins rejetés (champs structurels, chemins sans préfixe).
    """
    by_field: Dict[str, Dict[str, Any]] = {name: {} for name in OVERRIDABLE_FIELDS}
    rejected: Dict[str, Any] = {}

    for path, value in (overrides or {}).items():
        field, _, rest = path.partition(SEPARATOR)
        if field in by_field and rest:
            by_field[field][rest] = value
        else:
            rejected[path] = value

    if rejected:
        log.warning("Overrides ignorés (champ non surchargeable) : %s", sorted(rejected))
    return by_field["content"], by_field["metadata"], rejected


def diff_overrides(base: Optional[dict], edited: Optional[dict], prefix: str = "") -> Dict[str, Any]:
    """
    Map d'overrides minimale qui transforme base en edited.
    Une feuille supprimée dans edited n'est pas représentable : elle est ignorée.
    """
    base_leaves   = flatten_paths(base)
    edited_leaves = flatten_paths(edited)

    diff: Dict[str, Any] = {}
    for path, value in edited_leaves.items():
        if path not in base_leaves or base_leaves[path] != value:
            key = f"{prefix}{SEPARATOR}{path}" if prefix else path
            diff[key] = value
    return diff
