from abc import ABC, abstractmethod
from typing import List, Optional
from automation_coverage.models.schemas import Domain, Project, Tester


class IReferenceDataRepository(ABC):
    """Read access to projects, domains and testers used for mapping"""

    @abstractmethod
    async def list_projects(self) -> List[Project]:
        pass

    @abstractmethod
    async def get_project(self, project_id: int) -> Optional[Project]:
        pass

    @abstractmethod
    async def list_domains(self) -> List[Domain]:
        pass

    @abstractmethod
    async def get_domain(self, domain_id: int) -> Optional[Domain]:
        pass

    @abstractmethod
    async def list_testers(self) -> List[Tester]:
        pass

    @abstractmethod
    async def get_tester(self, tester_id: int) -> Optional[Tester]:
        pass
