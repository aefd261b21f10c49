"""
Dépendances d'authentification MJ (hôte de la partie)
=====================================================

Objectif
--------
Fournir une *dependency* FastAPI `mj_required` qui autorise l'accès hôte via un
**Bearer token** (`settings.MJ_TOKEN`).

Pourquoi accepter le préflight CORS ?
-------------------------------------
Le navigateur envoie une requête **OPTIONS** sans header `Authorization`. Il faut donc
protéger les routes une par une (ou par router), jamais l'app entière.

Comportement & codes retour
---------------------------
- 401 si aucune authentification.
- 403 si Bearer fourni mais invalide.
- True sinon.
"""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mystery_host.config.settings import settings

# Schéma Bearer (désactive l'erreur auto pour qu'on rende nos 401/403)
bearer = HTTPBearer(auto_error=False)


def mj_required(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)):
    """
    Dépendance d'accès hôte.

    Exceptions:
    - 401 si aucune authentification n'est fournie,
    - 403 si un Bearer est fourni mais ne correspond pas à `MJ_TOKEN`.
    """
    if credentials and (credentials.scheme or "").lower() == "bearer":
        if secrets.compare_digest(credentials.credentials, settings.MJ_TOKEN):
            return True
        raise HTTPException(status_code=403, detail="Invalid token")

    raise HTTPException(status_code=401, detail="MJ authentication required")


def mj_token_valid(token: Optional[str]) -> bool:
    """Vérification hors HTTP (WebSocket : token passé en query `?token=`)."""
    return bool(token) and secrets.compare_digest(token, settings.MJ_TOKEN)
