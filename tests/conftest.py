import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Créer engine SQLite pour tests AVANT d'importer l'app
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer l'app
import sitecms.core.database
sitecms.core.database.engine = test_engine
sitecms.core.database.SessionLocal = TestingSessionLocal

# Maintenant importer l'app (qui utilisera notre engine SQLite)
from sitecms.core.database import Base, get_db
from sitecms.main import app

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)

# Override la dépendance
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def auth_token(client):
    """Crée un compte admin et retourne son token JWT"""
    client.post(
        "/auth/signup",
        json={"email": "admin@example.com", "username": "admin", "password": "pass123"}
    )
    login_response = client.post(
        "/auth/login",
        json={"email": "admin@example.com", "password": "pass123"}
    )
    return login_response.json()["access_token"]


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def test_page(client, auth_headers):
    """Crée une page brouillon"""
    response = client.post("/pages", headers=auth_headers, json={"title": "Headspa"})
    return response.json()
