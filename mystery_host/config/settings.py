"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du service (nom, host/port, jeton MJ, chemins,
  durées du vote, throttle de sauvegarde, cadence du tick).
- Les valeurs par défaut conviennent pour un environnement de dev local.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les services/routers importent `from mystery_host.config.settings import settings`.

Exemples de `.env`
------------------
APP_NAME="Murder Mystery Host (Staging)"
PORT=8080
MJ_TOKEN="mettre-une-valeur-secrète-en-prod"
DATA_DIR="/var/opt/murder-mystery/data"
VOTING_DURATION_SECONDS=180
SAVE_THROTTLE_SECONDS=2.5
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Murder Mystery Host"
    # Bind réseau (FastAPI / Uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Jeton MJ (hôte de la partie) utilisé par la dépendance `mj_required`
    # ⚠️ Remplacez en production via .env
    MJ_TOKEN: str = "changeme-super-secret"

    # Répertoire et nom du fichier persisté (base des parties + joueurs)
    # Par défaut: <repo>/mystery_host/data/mystery_db.json
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
    DATABASE_FILENAME: str = "mystery_db.json"

    # Fenêtre de vote fixe (5 minutes)
    VOTING_DURATION_SECONDS: float = 300.0

    # Espacement minimal entre deux écritures disque
    SAVE_THROTTLE_SECONDS: float = 2.0

    # Tick périodique (expiration du vote + timers d'indices)
    TICK_INTERVAL_SECONDS: float = 1.0
    TICK_STARTUP_GRACE_SECONDS: float = 5.0

    # Annonces diffusées aux clients
    ANNOUNCE_PREFIX: str = "[Murder Mystery]"
    ANNOUNCEMENT_HISTORY: int = 200

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance unique importable partout : `settings`
settings = Settings()
