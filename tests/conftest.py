import io
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from taskshare.database import Database
from taskshare.main import create_app
from taskshare.models import User
from taskshare.security import get_password_hash
from taskshare.storage import FileStorage


@pytest.fixture
def app(tmp_path: Path):
    return create_app(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        upload_dir=str(tmp_path / "uploads"),
        configure_logging=False,
    )


@pytest.fixture
def client(app):
    # entering the client runs startup, which connects and creates tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def upload_dir(app) -> Path:
    return app.state.storage.upload_dir


@pytest.fixture
def database(tmp_path: Path):
    database = Database(f"sqlite:///{tmp_path / 'services.db'}")
    database.connect()
    database.create_tables()
    yield database
    database.disconnect()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def storage(tmp_path: Path) -> FileStorage:
    return FileStorage(tmp_path / "files", url_prefix="/uploads", max_size=1024)


def make_user(db, email: str, nome: Optional[str] = None) -> User:
    user = User(email=email, hashed_password=get_password_hash("pw123"), nome=nome)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def store_file(storage: FileStorage, name: str = "notes.txt", content: bytes = b"hello"):
    return storage.save(io.BytesIO(content), name)


def register_and_login(
    client: TestClient, email: str, password: str = "pw123", nome: Optional[str] = None
) -> Dict[str, str]:
    """Register a user through the API and return bearer auth headers."""
    body = {"email": email, "password": password}
    if nome is not None:
        body["nome"] = nome
    r = client.post("/auth/register", json=body)
    assert r.status_code == 201, r.text
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}
