"""
PathStore — accès par chemin pointé ("metadata.spacing.marginTop") dans un dict imbriqué.

Toutes les fonctions sont pures : set_path retourne un NOUVEL objet
(copie-sur-écriture le long du chemin, le reste garde ses références).
has_override / remove_override travaillent sur la map d'overrides plate
(les clés SONT les chemins), pas sur un objet imbriqué.
"""
import logging
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)

SEPARATOR = "."


def split_path(path: str) -> List[str]:
    """"a.b.c" → ["a", "b", "c"]. Une chaîne vide donne un segment vide."""
    return path.split(SEPARATOR)


def get_path(obj: Optional[dict], path: str) -> Any:
    """
    Lit la valeur au chemin donné.
    Retourne None dès qu'un segment est absent, n'est pas un dict, ou vaut None.
    Ne lève jamais.
    """
    if obj is None:
        return None

    node: Any = obj
    for part in split_path(path):
        if not isinstance(node, dict) or part not in node or node[part] is None:
            return None
        node = node[part]
    return node


def set_path(obj: Optional[dict], path: str, value: Any) -> Dict[str, Any]:
    """
    Retourne une copie de obj avec value posée au chemin donné.

    - les dicts traversés sont copiés (shallow), les sous-arbres voisins restent identiques (même objet)
    - un segment intermédiaire absent, None ou non-dict est remplacé par {} (coercition silencieuse,
      permissive : une liste ou un scalaire sur le chemin est écrasé)
    - le dernier segment est toujours écrasé, y compris une liste (remplacement complet)
    """
    parts = split_path(path)
    root: Dict[str, Any] = dict(obj) if isinstance(obj, dict) else {}

    node = root
    for part in parts[:-1]:
        child = node.get(part)
        if isinstance(child, dict):
            child = dict(child)
        else:
            if child is not None:
                log.debug("set_path %r : segment %r (%s) remplacé par {}", path, part, type(child).__name__)
            child = {}
        node[part] = child
        node = child

    node[parts[-1]] = value
    return root


def has_override(overrides: Optional[Dict[str, Any]], path: str) -> bool:
    """Test d'appartenance exact sur les clés de la map d'overrides."""
    if not overrides:
        return False
    return path in overrides


def remove_override(overrides: Optional[Dict[str, Any]], path: str) -> Dict[str, Any]:
    """Nouvelle map sans la clé ; clé absente → copie égale à l'entrée."""
    if not overrides:
        return {}
    return {k: v for k, v in overrides.items() if k != path}


def flatten_paths(obj: Optional[dict], prefix: str = "") -> Dict[str, Any]:
    """
    Liste les feuilles d'un dict imbriqué sous forme {chemin: valeur}.
    Les listes et les dicts vides sont des feuilles.
    """
    result: Dict[str, Any] = {}
    if not obj:
        return result
    for key, value in obj.items():
        path = f"{prefix}{SEPARATOR}{key}" if prefix else key
        if isinstance(value, dict) and value:
            result.update(flatten_paths(value, path))
        else:
            result[path] = value
    return result
