"""
Utilitaires IO JSON (rapides) basés sur orjson.
- read_json(Path)  → Any | None (None si fichier manquant)
- write_json(Path, data) → écriture atomique (fichier temporaire + replace)

Attention:
- orjson renvoie/attend des bytes; on lit/écrit en mode binaire.
- Les erreurs de décodage/encodage remontent en `PersistenceError`.
"""
import os
from pathlib import Path
from typing import Any

import orjson as json


class PersistenceError(RuntimeError):
    """Échec de lecture/écriture du fichier persisté."""


def read_json(path: Path) -> Any:
    """Lit un fichier JSON (ou None s'il n'existe pas)."""
    if not path.exists():
        return None
    try:
        with path.open("rb") as f:
            return json.loads(f.read())
    except (OSError, json.JSONDecodeError) as exc:
        raise PersistenceError(f"Lecture impossible: {path}") from exc


def write_json(path: Path, data: Any) -> None:
    """
    Écrit un fichier JSON sans jamais laisser de fichier tronqué :
    on écrit d'abord `<nom>.tmp` puis on remplace la cible.
    """
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, option=json.OPT_INDENT_2)
        with tmp_path.open("wb") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except (OSError, TypeError, json.JSONEncodeError) as exc:
        raise PersistenceError(f"Écriture impossible: {path}") from exc
