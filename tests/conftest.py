# tests/conftest.py

import itertools
import os
from datetime import datetime, timedelta

# Keep the app's own engine away from any real database
os.environ["DATABASE_URL"] = "sqlite://"

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models import Task, TaskPriority, TaskStatus, User, UserRole
from app.utils.security import create_access_token, hash_password
from main import app


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Cheap bcrypt rounds so user fixtures don't dominate the run"""
    real_gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": real_gensalt(rounds=rounds, prefix=prefix))


@pytest.fixture()
def engine():
    # One shared in-memory connection for the app and the test session
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.USER, name=None, email=None, password="secret123"):
        n = next(counter)
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            hashed_password=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_task(db):
    counter = itertools.count(1)
    base_time = datetime(2024, 1, 1, 9, 0, 0)

    def _make(assignee, creator=None, **fields):
        n = next(counter)
        task = Task(
            title=fields.pop("title", f"Task {n}"),
            description=fields.pop("description", f"Description {n}"),
            due_date=fields.pop("due_date", base_time + timedelta(days=7)),
            priority=fields.pop("priority", TaskPriority.MEDIUM),
            status=fields.pop("status", TaskStatus.PENDING),
            assigned_user_id=assignee.id,
            created_by_id=(creator or assignee).id,
            # Strictly increasing so "newest first" is deterministic
            created_at=fields.pop("created_at", base_time + timedelta(minutes=n)),
            **fields,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(role=UserRole.ADMIN, name="Admin User", email="admin@taskmanager.com")


@pytest.fixture()
def alice(make_user):
    return make_user(name="Alice", email="alice@example.com")


@pytest.fixture()
def bob(make_user):
    return make_user(name="Bob", email="bob@example.com")


@pytest.fixture()
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user.id)})}"}

    return _headers


@pytest.fixture()
def refetch(db):
    """Read a task straight from the database, bypassing the identity map"""
    def _refetch(task_id):
        db.expire_all()
        return db.query(Task).filter(Task.id == task_id).first()

    return _refetch
