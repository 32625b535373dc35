from typing import List, Optional
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.reference_repository import IReferenceDataRepository
from automation_coverage.models.database import DomainModel, ProjectModel, TesterModel
from automation_coverage.models.schemas import Domain, Project, Tester


class SQLReferenceDataRepository(IReferenceDataRepository):
    def __init__(self, db: Session):
        self.db = db

    async def list_projects(self) -> List[Project]:
        return [Project.model_validate(row) for row in self.db.query(ProjectModel).order_by(ProjectModel.name).all()]

    async def get_project(self, project_id: int) -> Optional[Project]:
        row = self.db.query(ProjectModel).filter(ProjectModel.id == project_id).first()
        return Project.model_validate(row) if row else None

    async def list_domains(self) -> List[Domain]:
        return [Domain.model_validate(row) for row in self.db.query(DomainModel).order_by(DomainModel.name).all()]

    async def get_domain(self, domain_id: int) -> Optional[Domain]:
        row = self.db.query(DomainModel).filter(DomainModel.id == domain_id).first()
        return Domain.model_validate(row) if row else None

    async def list_testers(self) -> List[Tester]:
        return [Tester.model_validate(row) for row in self.db.query(TesterModel).order_by(TesterModel.name).all()]

    async def get_tester(self, tester_id: int) -> Optional[Tester]:
        row = self.db.query(TesterModel).filter(TesterModel.id == tester_id).first()
        return Tester.model_validate(row) if row else None
