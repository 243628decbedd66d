"""
Integration test fixtures. Overrides get_db for API tests with in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def override_get_db():
    """Create in-memory engine and session factory for API tests."""
    from api.config import Base
    import api.models.models  # noqa: F401  registers tables on Base
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def db(override_get_db):
    """A session on the same in-memory DB the API client uses."""
    db_gen = override_get_db()
    session = next(db_gen)
    yield session
    session.close()


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def portal(api_client, db, seed_catalog, seed_competitors):
    """Seeded catalog and competitors, plus a registered user whose cookie is set."""
    seed_catalog(db)
    seed_competitors(db)
    response = api_client.post(
        "/auth/register",
        json={
            "email": "student@example.com",
            "password": "securepass123",
            "confirm_password": "securepass123",
            "display_name": "Student",
        },
    )
    assert response.status_code == 200
    return api_client


@pytest.fixture
def portal_user_id(portal, db):
    from api.models.models import User
    return db.query(User).filter(User.email == "student@example.com").first().id
