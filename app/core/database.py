from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Crée un engine SQLAlchemy.
    Pour SQLite, les clés étrangères sont activées sur chaque connexion,
    sinon le ON DELETE CASCADE des items n'est pas appliqué.
    """
    is_sqlite = url.startswith("sqlite")
    new_engine = create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        echo=echo,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


# --- Engine SQLAlchemy ---
engine = build_engine(str(settings.DATABASE_URL), echo=getattr(settings, "DB_ECHO", False))

# --- Session factory ---
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)

# --- Base déclarative ---
Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """
    Enregistre tous les modèles et crée les tables manquantes.
    IMPORTANT: il faut importer les modèles avant d'appeler create_all().
    """
    from app.models import order_models  # noqa: F401  import retardé
    Base.metadata.create_all(bind=bind or engine)
    logger.info("[pedidos-api] DB init: tables ensured")


def get_db():
    """Fournit une session DB par requête HTTP."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        # les erreurs métier sont loguées par les exception handlers
        db.rollback()
        logger.debug("[pedidos-api] db session rolled back due to exception")
        raise
    finally:
        db.close()
        logger.debug("[pedidos-api] db session closed")


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit en sortie normale, rollback sur toute exception."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
