from typing import List, Optional
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.build_result_repository import IBuildResultRepository
from automation_coverage.models.database import BuildResultModel, TestCaseRecordModel
from automation_coverage.models.schemas import (
    BuildResult,
    BuildSummary,
    TestCaseRecord,
    TestCaseRecordData,
)


class SQLBuildResultRepository(IBuildResultRepository):
    """SQLAlchemy implementation of the build result repository"""

    def __init__(self, db: Session):
        self.db = db

    async def get_by_id(self, result_id: int) -> Optional[BuildResult]:
        row = self.db.query(BuildResultModel).filter(BuildResultModel.id == result_id).first()
        return BuildResult.model_validate(row) if row else None

    async def get_by_job_and_build(self, job_name: str, build_number: str) -> Optional[BuildResult]:
        row = (
            self.db.query(BuildResultModel)
            .filter(BuildResultModel.job_name == job_name, BuildResultModel.build_number == build_number)
            .first()
        )
        return BuildResult.model_validate(row) if row else None

    # Build numbers are stored as text; recency comes from the build timestamp, then the row id.
    _newest_first = (BuildResultModel.build_timestamp.desc(), BuildResultModel.id.desc())

    async def latest_by_job(self, job_name: str) -> Optional[BuildResult]:
        row = (
            self.db.query(BuildResultModel)
            .filter(BuildResultModel.job_name == job_name)
            .order_by(*self._newest_first)
            .first()
        )
        return BuildResult.model_validate(row) if row else None

    async def list_latest_per_job(self) -> List[BuildResult]:
        rows = self.db.query(BuildResultModel).order_by(BuildResultModel.job_name, *self._newest_first).all()
        latest = {}
        for row in rows:
            latest.setdefault(row.job_name, row)
        return [BuildResult.model_validate(row) for row in latest.values()]

    async def upsert(self, summary: BuildSummary) -> BuildResult:
        row = (
            self.db.query(BuildResultModel)
            .filter(
                BuildResultModel.job_name == summary.job_name,
                BuildResultModel.build_number == summary.build_number,
            )
            .first()
        )
        if row is None:
            row = BuildResultModel(job_name=summary.job_name, build_number=summary.build_number)
            self.db.add(row)

        for field, value in summary.model_dump(exclude={"job_name", "build_number"}).items():
            setattr(row, field, value)

        self.db.commit()
        self.db.refresh(row)
        return BuildResult.model_validate(row)

    async def update_notes(self, result_id: int, notes: Optional[str]) -> Optional[BuildResult]:
        row = self.db.query(BuildResultModel).filter(BuildResultModel.id == result_id).first()
        if not row:
            return None
        row.notes = notes
        self.db.commit()
        self.db.refresh(row)
        return BuildResult.model_validate(row)

    async def list_test_records(self, result_id: int) -> List[TestCaseRecord]:
        rows = (
            self.db.query(TestCaseRecordModel)
            .filter(TestCaseRecordModel.build_result_id == result_id)
            .order_by(TestCaseRecordModel.id)
            .all()
        )
        return [TestCaseRecord.model_validate(row) for row in rows]

    async def replace_test_records(self, result_id: int, records: List[TestCaseRecordData]) -> List[TestCaseRecord]:
        self.db.query(TestCaseRecordModel).filter(TestCaseRecordModel.build_result_id == result_id).delete()
        rows = [TestCaseRecordModel(build_result_id=result_id, **record.model_dump()) for record in records]
        self.db.add_all(rows)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        return [TestCaseRecord.model_validate(row) for row in rows]
