import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_FORMAT", "text")
# L'engine global n'est jamais utilisé par les tests (get_db est surchargé)
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, build_engine, get_db
from app.main import app
from app.models import order_models  # noqa: F401  enregistre les tables


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{(tmp_path / 'pedidos_test.db').as_posix()}")
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_payload():
    """Fabrique un payload externe valide, surchargeable champ par champ."""

    def _make(numero="v100-01", valor=50.5, data="2025-01-01", items=None, **overrides):
        payload = {
            "numeroPedido": numero,
            "valorTotal": valor,
            "dataCriacao": data,
            "items": items if items is not None else [
                {"idItem": "7", "quantidadeItem": 2, "valorItem": 10.25}
            ],
        }
        payload.update(overrides)
        return payload

    return _make
