from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set
from automation_coverage.models.schemas import LinkedTestCase


class ITestCaseLinkRepository(ABC):
    """Interface for test cases linked to synced issues"""

    @abstractmethod
    async def get_by_id(self, link_id: int) -> Optional[LinkedTestCase]:
        pass

    @abstractmethod
    async def list_by_issue(self, issue_id: int) -> List[LinkedTestCase]:
        pass

    @abstractmethod
    async def list_by_sprint(self, sprint_id: str) -> List[LinkedTestCase]:
        pass

    @abstractmethod
    async def titles_for_issue(self, issue_id: int) -> Set[str]:
        pass

    @abstractmethod
    async def create(self, issue_id: int, title: str, qtest_id: Optional[str] = None) -> LinkedTestCase:
        pass

    @abstractmethod
    async def update(self, link_id: int, fields: Dict[str, Any]) -> Optional[LinkedTestCase]:
        pass
