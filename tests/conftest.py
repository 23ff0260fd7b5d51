import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "local"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import config, storage
from app.auth import create_access_token, hash_password
from app.database import Base, get_db
from app.main import app
from app.models import Client, NotificationSetting, User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def uploads_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(config, "STORAGE_BACKEND", "local")
    storage.reset_storage()
    yield tmp_path / "uploads"
    storage.reset_storage()


def make_user(db_session, name="ד\"ר רונית לוי", email="ronit@example.com", with_settings=True):
    user = User(name=name, email=email, hashed_password=hash_password("secret123"))
    db_session.add(user)
    db_session.flush()
    if with_settings:
        for channel in ("email", "push"):
            db_session.add(NotificationSetting(user_id=user.id, channel=channel, enabled=True))
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, name="יוסי כהן", email="yossi@example.com")


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user):
    return headers_for(user)


@pytest.fixture
def other_headers(other_user):
    return headers_for(other_user)


@pytest.fixture
def patient(db_session, user):
    patient = Client(
        therapist_id=user.id,
        name="דנה ישראלי",
        email="dana@example.com",
        phone="050-1234567",
        status="ACTIVE",
    )
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient
