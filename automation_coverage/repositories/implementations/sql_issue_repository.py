from typing import List, Optional
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.issue_repository import IJiraIssueRepository
from automation_coverage.models.database import JiraIssueModel, TestCaseLinkModel
from automation_coverage.models.schemas import JiraIssue, LinkedTestCase, NormalizedIssue

SYNC_OWNED_FIELDS = (
    "summary",
    "description",
    "assignee",
    "assignee_display_name",
    "sprint_id",
    "sprint_name",
    "issue_type",
    "status",
    "priority",
)


class SQLJiraIssueRepository(IJiraIssueRepository):
    """SQLAlchemy implementation of the synced issue repository"""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, jira_key: str) -> Optional[JiraIssueModel]:
        return self.db.query(JiraIssueModel).filter(JiraIssueModel.jira_key == jira_key).first()

    def _links(self, issue_id: int) -> List[LinkedTestCase]:
        rows = (
            self.db.query(TestCaseLinkModel)
            .filter(TestCaseLinkModel.jira_issue_id == issue_id)
            .order_by(TestCaseLinkModel.id)
            .all()
        )
        return [LinkedTestCase.model_validate(row) for row in rows]

    async def get_by_key(self, jira_key: str) -> Optional[JiraIssue]:
        db_issue = self._find(jira_key)
        if db_issue:
            return JiraIssue.model_validate(db_issue)
        return None

    async def get_with_links(self, jira_key: str) -> Optional[JiraIssue]:
        db_issue = self._find(jira_key)
        if not db_issue:
            return None
        issue = JiraIssue.model_validate(db_issue)
        issue.linked_test_cases = self._links(db_issue.id)
        return issue

    async def list_by_sprint_with_links(self, sprint_id: str) -> List[JiraIssue]:
        db_issues = (
            self.db.query(JiraIssueModel)
            .filter(JiraIssueModel.sprint_id == sprint_id)
            .order_by(JiraIssueModel.jira_key)
            .all()
        )
        issues = []
        for db_issue in db_issues:
            issue = JiraIssue.model_validate(db_issue)
            issue.linked_test_cases = self._links(db_issue.id)
            issues.append(issue)
        return issues

    async def create(self, issue: NormalizedIssue) -> JiraIssue:
        db_issue = JiraIssueModel(
            jira_key=issue.jira_key,
            **{field: getattr(issue, field) for field in SYNC_OWNED_FIELDS},
        )
        self.db.add(db_issue)
        self.db.commit()
        self.db.refresh(db_issue)
        return JiraIssue.model_validate(db_issue)

    async def update_sync_fields(self, issue_id: int, issue: NormalizedIssue) -> Optional[JiraIssue]:
        db_issue = self.db.query(JiraIssueModel).filter(JiraIssueModel.id == issue_id).first()
        if not db_issue:
            return None

        for field in SYNC_OWNED_FIELDS:
            setattr(db_issue, field, getattr(issue, field))

        self.db.commit()
        self.db.refresh(db_issue)
        return JiraIssue.model_validate(db_issue)

    async def update_keyword_search(self, issue_id: int, keyword: str, count: int) -> Optional[JiraIssue]:
        db_issue = self.db.query(JiraIssueModel).filter(JiraIssueModel.id == issue_id).first()
        if not db_issue:
            return None

        db_issue.search_keyword = keyword
        db_issue.keyword_count = count
        self.db.commit()
        self.db.refresh(db_issue)
        return JiraIssue.model_validate(db_issue)

    async def delete(self, issue_id: int) -> bool:
        db_issue = self.db.query(JiraIssueModel).filter(JiraIssueModel.id == issue_id).first()
        if not db_issue:
            return False

        self.db.query(TestCaseLinkModel).filter(TestCaseLinkModel.jira_issue_id == issue_id).delete()
        self.db.delete(db_issue)
        self.db.commit()
        return True

    async def get_by_id(self, issue_id: int) -> Optional[JiraIssue]:
        db_issue = self.db.query(JiraIssueModel).filter(JiraIssueModel.id == issue_id).first()
        if db_issue:
            return JiraIssue.model_validate(db_issue)
        return None
