from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any


class IJenkinsService(ABC):
    """Interface for CI server (Jenkins) operations"""

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def list_jobs(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_last_build(self, job_name: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_build(self, job_name: str, build_number: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_artifact(self, build_url: str, relative_path: str) -> Optional[str]:
        """Raw text of one archived build artifact"""
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        pass
