"""
Shared pytest fixtures.

Provides:
- An in-memory SQLite database with the full schema
- A TestClient wired to that database
- Organization / user factories and bearer-token headers
"""
import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamaccess.database import Base, get_db
from teamaccess.main import app, limiter
from teamaccess.models import Organization, OrganizationMember, User
from teamaccess.services.auth_service import create_user_token


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest.fixture()
def override_get_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()
    return _get_db


@pytest.fixture()
def client(override_get_db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with fresh rate limit counters."""
    limiter.reset()
    yield


# ============================================================================
# Data Factories
# ============================================================================

@pytest.fixture()
def make_org(db):
    counter = itertools.count(1)

    def _make(name=None):
        org = Organization(name=name or f"Organization {next(counter)}")
        db.add(org)
        db.commit()
        db.refresh(org)
        return org

    return _make


@pytest.fixture()
def org(make_org):
    return make_org("Acme Ltda")


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    def _make(organization=None, role="agent", is_superadmin=False, is_active=True):
        n = next(counter)
        user = User(
            email=f"user{n}@example.com",
            full_name=f"User {n}",
            is_superadmin=is_superadmin,
            is_active=is_active,
        )
        db.add(user)
        db.flush()
        if organization is not None:
            db.add(OrganizationMember(organization_id=organization.id, user_id=user.id, role=role))
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def auth():
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return _headers


@pytest.fixture()
def owner(make_user, org):
    return make_user(org, role="owner")


@pytest.fixture()
def admin(make_user, org):
    return make_user(org, role="admin")


@pytest.fixture()
def manager(make_user, org):
    return make_user(org, role="manager")


@pytest.fixture()
def agent(make_user, org):
    return make_user(org, role="agent")


@pytest.fixture()
def superadmin(make_user):
    return make_user(None, is_superadmin=True)
