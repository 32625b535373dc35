from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.automation_candidate_repository import IAutomationCandidateRepository
from automation_coverage.models.database import AutomationCandidateModel
from automation_coverage.models.schemas import AutomationCandidate


class SQLAutomationCandidateRepository(IAutomationCandidateRepository):
    """SQLAlchemy implementation of the automation candidate repository"""

    def __init__(self, db: Session):
        self.db = db

    async def find_by_title(self, title: str) -> Optional[AutomationCandidate]:
        row = (
            self.db.query(AutomationCandidateModel)
            .filter(AutomationCandidateModel.title == title)
            .order_by(AutomationCandidateModel.id)
            .first()
        )
        return AutomationCandidate.model_validate(row) if row else None

    async def create(self, fields: Dict[str, Any]) -> AutomationCandidate:
        row = AutomationCandidateModel(**fields)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return AutomationCandidate.model_validate(row)

    async def update(self, candidate_id: int, fields: Dict[str, Any]) -> Optional[AutomationCandidate]:
        row = self.db.query(AutomationCandidateModel).filter(AutomationCandidateModel.id == candidate_id).first()
        if not row:
            return None

        for field, value in fields.items():
            setattr(row, field, value)

        self.db.commit()
        self.db.refresh(row)
        return AutomationCandidate.model_validate(row)

    async def get_all(self) -> List[AutomationCandidate]:
        rows = self.db.query(AutomationCandidateModel).order_by(AutomationCandidateModel.id).all()
        return [AutomationCandidate.model_validate(row) for row in rows]
