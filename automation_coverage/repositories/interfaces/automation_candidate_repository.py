from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from automation_coverage.models.schemas import AutomationCandidate


class IAutomationCandidateRepository(ABC):
    """Interface for test cases queued for automation"""

    @abstractmethod
    async def find_by_title(self, title: str) -> Optional[AutomationCandidate]:
        pass

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> AutomationCandidate:
        pass

    @abstractmethod
    async def update(self, candidate_id: int, fields: Dict[str, Any]) -> Optional[AutomationCandidate]:
        pass

    @abstractmethod
    async def get_all(self) -> List[AutomationCandidate]:
        pass
