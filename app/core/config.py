# app/core/config.py (Pedidos API)

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEV_ENVIRONMENTS = {"dev", "development", "local"}


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings:
    """
    Configuration unique de l'app (stateless).
    - DB: DATABASE_URL si présent, sinon fichier SQLite (SQLITE_PATH).
    - Erreurs: le détail technique n'est renvoyé au client qu'en ENV de dev.
    - Logs: JSON sur stdout par défaut.
    """

    def __init__(self) -> None:
        # ---------- Métadonnées ----------
        self.ENV = os.getenv("ENV", "prod")
        self.APP_NAME = os.getenv("APP_NAME", "pedidos-api")
        self.APP_TITLE = os.getenv("APP_TITLE", "API de Gerenciamento de Pedidos")
        self.APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
        self.APP_DESCRIPTION = os.getenv("APP_DESCRIPTION", "API CRUD de pedidos")

        # ---------- Serveur ----------
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = _get_int("PORT", 3000)

        # ---------- Base de données ----------
        self.DATABASE_URL = os.getenv("DATABASE_URL") or self._compose_db_url()
        self.DB_ECHO = _get_bool("DB_ECHO", False)

        # ---------- Logging ----------
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

        # ---------- CORS ----------
        self.CORS_ALLOW_ORIGINS = [
            o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        ]
        self.CORS_ALLOW_CREDENTIALS = _get_bool("CORS_ALLOW_CREDENTIALS", True)
        self.CORS_ALLOW_METHODS = os.getenv("CORS_ALLOW_METHODS", "*")
        self.CORS_ALLOW_HEADERS = os.getenv("CORS_ALLOW_HEADERS", "*")

    @property
    def is_dev(self) -> bool:
        return self.ENV.strip().lower() in DEV_ENVIRONMENTS

    @property
    def database_kind(self) -> str:
        """Nom lisible du moteur, pour /health et les logs de démarrage."""
        scheme = self.DATABASE_URL.split(":", 1)[0]
        backend = scheme.split("+", 1)[0]
        return "SQLite" if backend == "sqlite" else backend

    # -------- Helpers internes --------
    def _compose_db_url(self) -> str:
        sqlite_path = os.getenv("SQLITE_PATH", "pedidos.db")
        path = Path(sqlite_path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path.as_posix()}"


settings = Settings()
