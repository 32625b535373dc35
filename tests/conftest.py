import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from typing import Any, Dict, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from automation_coverage.core.database import get_database
from automation_coverage.models.database import Base, DomainModel, ProjectModel, TesterModel
from automation_coverage.repositories.interfaces.jira_service import IJiraService
from automation_coverage.repositories.interfaces.jenkins_service import IJenkinsService

# Test database
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_database] = override_get_db


class FakeJiraService(IJiraService):
    """In-memory issue tracker keyed by the search/sprint requests it receives"""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.sprint_pages: List[Dict[str, Any]] = []
        self.issue_pages: List[Dict[str, Any]] = []
        self.search_result: Optional[Dict[str, Any]] = None
        self.comments: Dict[str, Dict[str, Any]] = {}
        self.search_urls: List[str] = []

    def is_configured(self) -> bool:
        return self.configured

    async def get_sprint_page(self, board_id: str, start_at: int, max_results: int) -> Optional[Dict[str, Any]]:
        for page in self.sprint_pages:
            if page.get("startAt", 0) == start_at:
                return page
        return None

    async def search(self, search_url: str) -> Optional[Dict[str, Any]]:
        self.search_urls.append(search_url)
        if "startAt=" not in search_url:
            return self.search_result
        for page in self.issue_pages:
            if f"startAt={page.get('startAt', 0)}&" in search_url:
                return page
        return None

    async def get_issue_comments(self, issue_key: str) -> Dict[str, Any]:
        return self.comments.get(issue_key, {"comments": []})

    async def test_connection(self) -> bool:
        return self.configured


class FakeJenkinsService(IJenkinsService):
    def __init__(self):
        self.jobs: List[Dict[str, Any]] = []
        self.last_builds: Dict[str, Dict[str, Any]] = {}
        self.builds: Dict[tuple, Dict[str, Any]] = {}
        self.artifacts: Dict[str, str] = {}
        self.artifact_requests: List[str] = []

    def is_configured(self) -> bool:
        return True

    async def list_jobs(self) -> List[Dict[str, Any]]:
        return self.jobs

    async def get_last_build(self, job_name: str) -> Optional[Dict[str, Any]]:
        return self.last_builds.get(job_name)

    async def get_build(self, job_name: str, build_number: str) -> Optional[Dict[str, Any]]:
        return self.builds.get((job_name, str(build_number)))

    async def get_artifact(self, build_url: str, relative_path: str) -> Optional[str]:
        self.artifact_requests.append(relative_path)
        return self.artifacts.get(relative_path)

    async def test_connection(self) -> bool:
        return True


@pytest.fixture
def db_session():
    """Fresh schema per test on a shared in-memory connection"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def reference_data(db_session):
    domain = DomainModel(name="Payments", description="Payment flows", status="ACTIVE")
    db_session.add(domain)
    db_session.commit()

    project = ProjectModel(name="Checkout", description="Checkout web app", status="ACTIVE", domain_id=domain.id)
    tester = TesterModel(name="Sam Rivera", email="sam@example.com", role="QA Engineer", experience=4)
    db_session.add_all([project, tester])
    db_session.commit()

    return {"domain_id": domain.id, "project_id": project.id, "tester_id": tester.id}


@pytest.fixture
def fake_jira():
    return FakeJiraService()


@pytest.fixture
def fake_jenkins():
    return FakeJenkinsService()


@pytest.fixture
def test_client(db_session):
    """Synchronous test client bound to the per-test schema"""
    return TestClient(app)
