from abc import ABC, abstractmethod
from typing import List, Dict, Any


class IQTestService(ABC):
    """Interface for test-management (qTest) operations"""

    @abstractmethod
    async def fetch_test_case_details(self, test_case_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def search_test_cases_by_title(self, title: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        pass
