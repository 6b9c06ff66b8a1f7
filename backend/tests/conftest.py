"""
Test configuration and fixtures.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agency.db import Base, get_db
from agency.models import (
    Client,
    Project,
    ProjectType,
    ProjectWebsite,
    Role,
    Server,
    User,
    WebDocumentation,
)
from agency.auth import get_password_hash

# Test database URL (in-memory SQLite)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# Create test engine
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database session override."""
    from fastapi.testclient import TestClient
    from agency.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db_session, email, name, password, role):
    user = User(
        email=email,
        name=name,
        password_hash=get_password_hash(password),
        role=role,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _login(client, email, password):
    response = client.post("/auth/login", json={"email": email, "password": password})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    """Create an admin user for testing."""
    return _create_user(db_session, "admin@test.com", "Admin Test", "admin123", Role.ADMIN)


@pytest.fixture
def agent_user(db_session):
    """Create an agent user for testing."""
    return _create_user(db_session, "agent@test.com", "Agent Test", "agent123", Role.AGENT)


@pytest.fixture
def sales_user(db_session):
    """Create a sales user for testing."""
    return _create_user(db_session, "sales@test.com", "Sales Test", "sales123", Role.SALES)


@pytest.fixture
def auth_headers(client, admin_user):
    """Get authentication headers for admin user."""
    return _login(client, "admin@test.com", "admin123")


@pytest.fixture
def agent_auth_headers(client, agent_user):
    """Get authentication headers for agent user."""
    return _login(client, "agent@test.com", "agent123")


@pytest.fixture
def sales_auth_headers(client, sales_user):
    """Get authentication headers for sales user."""
    return _login(client, "sales@test.com", "sales123")


@pytest.fixture
def froxlor_server(db_session):
    server = Server(
        name="web01",
        ip="10.0.0.1",
        ftp_host="ftp.web01.example",
        froxlor_url="https://panel.web01.example",
        froxlor_api_key="key",
        froxlor_api_secret="secret",
        froxlor_version="2.0+",
    )
    db_session.add(server)
    db_session.commit()
    db_session.refresh(server)
    return server


@pytest.fixture
def customer(db_session):
    """A client with a customer number and no server yet."""
    client = Client(
        name="Bäckerei Müller",
        customer_no="E25065",
        email="info@mueller-backstube.de",
        firstname="Hans",
        lastname="Müller",
    )
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def website_project(db_session, customer):
    project = Project(client_id=customer.id, title="Relaunch", type=ProjectType.WEBSITE)
    project.website = ProjectWebsite(domain="mueller-backstube.de")
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def web_documentation(db_session, website_project, customer):
    doc = WebDocumentation(
        project_id=website_project.id,
        contact_email=customer.email,
        website_domain="mueller-backstube.de",
        style_types=[],
        rejected_steps=[],
    )
    db_session.add(doc)
    db_session.commit()
    db_session.refresh(doc)
    return doc
