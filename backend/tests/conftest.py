# tests/conftest.py
"""Shared fixtures - in-memory SQLite database + source record factories"""

import pytest
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from influencer_hub.database import Base
from influencer_hub.models import SourceProfile, UnifiedIdentity  # noqa: F401


@pytest.fixture
def test_engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """Database session bound to the in-memory engine"""
    TestSession = sessionmaker(
        bind=test_engine,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )
    session = TestSession()

    yield session

    session.rollback()
    session.close()


def build_profile(platform="TWITCH", username=None, **kwargs):
    """Unsaved SourceProfile with sensible defaults"""
    username = username or f"user_{uuid4().hex[:8]}"
    data = {
        "id": str(uuid4()),
        "platform": platform,
        "username": username,
        "display_name": username,
        "followers": 1000,
        "tags": [],
        "social_links": [],
        "fraud_check": "PENDING",
        "is_live": False,
    }
    data.update(kwargs)
    return SourceProfile(**data)


@pytest.fixture
def make_profile():
    """Factory for unsaved source records"""
    return build_profile


@pytest.fixture
def add_profiles(db_session):
    """Persist source records and return them"""
    def _add(*profiles):
        db_session.add_all(profiles)
        db_session.commit()
        return list(profiles)
    return _add
