"""
Models / announcement.py
Rôle:
- Définir l'annonce standard diffusée aux joueurs (chat de l'hôte, WS, historique).

Notes:
- `kind` restreint à un jeu de valeurs (Literal) pour éviter les fautes de frappe.
- `timestamp` en secondes epoch (même horloge que les timers d'indices).
"""
import time
from typing import Literal

from pydantic import BaseModel, Field

# Catégories d'annonces émises par le moteur
AnnouncementKind = Literal["voting_started", "voting_ended", "voting_processed", "hint_fired"]


class Announcement(BaseModel):
    """Une ligne annoncée dans le chat de la partie."""
    kind: AnnouncementKind
    text: str  # texte complet, préfixe inclus
    timestamp: float = Field(default_factory=time.time)
