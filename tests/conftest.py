# tests/conftest.py
import os
from itertools import count
from typing import Iterator

# Configure the app for tests before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["COMMENT_MAX_DEPTH"] = "5"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from main import app as fastapi_app
from peekhour.core.database import Base, enable_sqlite_foreign_keys, get_db
from peekhour.core.security import jwt_manager
from peekhour.models import Department, DepartmentMember, Post, User

_USER_COUNTER = count(1)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    """A fresh in-memory database per test, with cascading foreign keys on."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory) -> Iterator[Session]:
    """Session for arranging data and inspecting results from tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    def _get_db_override():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = _get_db_override
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.pop(get_db, None)


# ==================== Factories ====================


@pytest.fixture()
def make_user(db: Session):
    def _make_user(name: str = None, role: str = "user") -> User:
        n = next(_USER_COUNTER)
        user = User(
            username=f"user{n}",
            email=f"user{n}@example.com",
            name=name or f"User {n}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = jwt_manager.create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def make_department(db: Session):
    def _make_department(
        creator: User, require_approval: bool = False, name: str = "Night Owls"
    ) -> Department:
        department = Department(
            name=name,
            type="society",
            created_by=creator.id,
            require_approval=require_approval,
        )
        db.add(department)
        db.flush()
        db.add(
            DepartmentMember(
                department_id=department.id, user_id=creator.id, role="admin"
            )
        )
        db.commit()
        db.refresh(department)
        return department

    return _make_department


@pytest.fixture()
def add_member(db: Session):
    def _add_member(department: Department, user: User) -> DepartmentMember:
        membership = DepartmentMember(
            department_id=department.id, user_id=user.id, role="member"
        )
        db.add(membership)
        db.commit()
        return membership

    return _add_member


@pytest.fixture()
def make_post(db: Session):
    def _make_post(
        author: User,
        content: str = "Sunset over the harbour",
        department: Department = None,
        is_active: bool = True,
    ) -> Post:
        post = Post(
            user_id=author.id,
            content=content,
            department_id=department.id if department else None,
            is_active=is_active,
        )
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make_post


# ==================== Common actors ====================


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("Alice")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("Bob")


@pytest.fixture()
def carol(make_user) -> User:
    return make_user("Carol")
