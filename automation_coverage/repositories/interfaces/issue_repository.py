from abc import ABC, abstractmethod
from typing import List, Optional
from automation_coverage.models.schemas import JiraIssue, NormalizedIssue


class IJiraIssueRepository(ABC):
    """Interface for synced issue storage.

    ``get_by_key`` loads the issue row only; ``get_with_links`` also loads its
    linked test cases.
    """

    @abstractmethod
    async def get_by_key(self, jira_key: str) -> Optional[JiraIssue]:
        pass

    @abstractmethod
    async def get_with_links(self, jira_key: str) -> Optional[JiraIssue]:
        pass

    @abstractmethod
    async def list_by_sprint_with_links(self, sprint_id: str) -> List[JiraIssue]:
        pass

    @abstractmethod
    async def create(self, issue: NormalizedIssue) -> JiraIssue:
        pass

    @abstractmethod
    async def update_sync_fields(self, issue_id: int, issue: NormalizedIssue) -> Optional[JiraIssue]:
        """Overwrite only the fields owned by the issue tracker"""
        pass

    @abstractmethod
    async def update_keyword_search(self, issue_id: int, keyword: str, count: int) -> Optional[JiraIssue]:
        pass

    @abstractmethod
    async def delete(self, issue_id: int) -> bool:
        """Delete the issue and, first, every linked test case"""
        pass

    @abstractmethod
    async def get_by_id(self, issue_id: int) -> Optional[JiraIssue]:
        pass
