from typing import Any, Dict, List, Optional, Set
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.test_case_link_repository import ITestCaseLinkRepository
from automation_coverage.models.database import JiraIssueModel, TestCaseLinkModel
from automation_coverage.models.schemas import AutomationStatus, LinkedTestCase


class SQLTestCaseLinkRepository(ITestCaseLinkRepository):
    """SQLAlchemy implementation of the linked test case repository"""

    def __init__(self, db: Session):
        self.db = db

    async def get_by_id(self, link_id: int) -> Optional[LinkedTestCase]:
        db_link = self.db.query(TestCaseLinkModel).filter(TestCaseLinkModel.id == link_id).first()
        if db_link:
            return LinkedTestCase.model_validate(db_link)
        return None

    async def list_by_issue(self, issue_id: int) -> List[LinkedTestCase]:
        rows = (
            self.db.query(TestCaseLinkModel)
            .filter(TestCaseLinkModel.jira_issue_id == issue_id)
            .order_by(TestCaseLinkModel.id)
            .all()
        )
        return [LinkedTestCase.model_validate(row) for row in rows]

    async def list_by_sprint(self, sprint_id: str) -> List[LinkedTestCase]:
        rows = (
            self.db.query(TestCaseLinkModel)
            .join(JiraIssueModel, JiraIssueModel.id == TestCaseLinkModel.jira_issue_id)
            .filter(JiraIssueModel.sprint_id == sprint_id)
            .order_by(TestCaseLinkModel.id)
            .all()
        )
        return [LinkedTestCase.model_validate(row) for row in rows]

    async def titles_for_issue(self, issue_id: int) -> Set[str]:
        rows = (
            self.db.query(TestCaseLinkModel.qtest_title)
            .filter(TestCaseLinkModel.jira_issue_id == issue_id)
            .all()
        )
        return {row[0] for row in rows}

    async def create(self, issue_id: int, title: str, qtest_id: Optional[str] = None) -> LinkedTestCase:
        db_link = TestCaseLinkModel(
            jira_issue_id=issue_id,
            qtest_title=title,
            qtest_id=qtest_id,
            can_be_automated=False,
            cannot_be_automated=False,
            automation_status=AutomationStatus.PENDING,
        )
        self.db.add(db_link)
        self.db.commit()
        self.db.refresh(db_link)
        return LinkedTestCase.model_validate(db_link)

    async def update(self, link_id: int, fields: Dict[str, Any]) -> Optional[LinkedTestCase]:
        db_link = self.db.query(TestCaseLinkModel).filter(TestCaseLinkModel.id == link_id).first()
        if not db_link:
            return None

        for field, value in fields.items():
            setattr(db_link, field, value)

        self.db.commit()
        self.db.refresh(db_link)
        return LinkedTestCase.model_validate(db_link)
