"""
Models / chat.py
Rôle:
- Contrat d'un message de chat reçu du client hôte (le transport est hors périmètre).

Champs:
- kind: type de message côté client (chaîne libre) ; seul `tell_incoming` (whisper
  reçu) est exploité, tout autre type est accepté puis ignoré.
- sender: nom du joueur émetteur, tel qu'il apparaît dans le roster.
- message: texte brut du whisper.
"""
from pydantic import BaseModel

CHAT_KIND_WHISPER = "tell_incoming"


class ChatMessage(BaseModel):
    kind: str
    sender: str
    message: str

    @property
    def is_whisper(self) -> bool:
        return self.kind == CHAT_KIND_WHISPER
