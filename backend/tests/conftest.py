"""
Shared fixtures: an in-memory database and a scripted Graph API double.
"""
import json
import os
from urllib.parse import parse_qs

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("DATABASE_PUBLIC_URL", None)

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import FacebookAccount, Project
from app.services.provisioning import GraphClient

GRAPH_BASE = "https://graph.test/v18.0"


class GraphRecorder:
    """Records every outbound request and answers it with the given handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> GraphClient:
        return GraphClient(base_url=GRAPH_BASE, timeout=5, transport=httpx.MockTransport(self))

    def posts_to(self, suffix: str):
        return [r for r in self.requests if r.method == "POST" and r.url.path.endswith(suffix)]


def form_body(request: httpx.Request) -> dict:
    """Decode a form-encoded request body into single values."""
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def json_body(request: httpx.Request) -> dict:
    return json.loads(request.content)


def is_json(request: httpx.Request) -> bool:
    return request.headers.get("content-type", "").startswith("application/json")


def graph_error(message: str, code: int = 100, subcode=None, status_code: int = 400) -> httpx.Response:
    error = {"message": message, "type": "OAuthException", "code": code}
    if subcode is not None:
        error["error_subcode"] = subcode
    return httpx.Response(status_code, json={"error": error})


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def project(db_session):
    project = Project(name="Spring Launch")
    db_session.add(project)
    db_session.flush()
    db_session.add(FacebookAccount(
        project_id=project.id,
        access_token="test-token",
        ad_account_id="123456789",
        page_id="page_42",
    ))
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def graph():
    """Factory: graph(handler) -> GraphRecorder"""
    return GraphRecorder

