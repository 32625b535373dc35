from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class IJiraService(ABC):
    """Interface for issue tracker (JIRA) operations"""

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def get_sprint_page(self, board_id: str, start_at: int, max_results: int) -> Optional[Dict[str, Any]]:
        """One page of the agile board sprint listing, or None when unavailable"""
        pass

    @abstractmethod
    async def search(self, search_url: str) -> Optional[Dict[str, Any]]:
        """Run a prepared search URL, or None when unavailable"""
        pass

    @abstractmethod
    async def get_issue_comments(self, issue_key: str) -> Dict[str, Any]:
        """Comments of one issue; raises ExternalServiceError on failure"""
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        pass
