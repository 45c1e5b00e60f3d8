"""Shared fixtures: in-memory SQLite database and an API client bound to it."""
import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.db.session import Base, get_db
from app.db import models  # noqa
from app.main import app


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def notify_mock():
    with patch("app.api.routes_work_orders.enqueue_status_notification", new=MagicMock()) as mock:
        yield mock


@pytest.fixture
def client(db_session, notify_mock):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        # no context manager: lifespan (db wait + migrations) is not run
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
