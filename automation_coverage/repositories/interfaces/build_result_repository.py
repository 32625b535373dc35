from abc import ABC, abstractmethod
from typing import List, Optional
from automation_coverage.models.schemas import (
    BuildResult,
    BuildSummary,
    TestCaseRecord,
    TestCaseRecordData,
)


class IBuildResultRepository(ABC):
    """Interface for CI build results and their per-test records"""

    @abstractmethod
    async def get_by_id(self, result_id: int) -> Optional[BuildResult]:
        pass

    @abstractmethod
    async def get_by_job_and_build(self, job_name: str, build_number: str) -> Optional[BuildResult]:
        pass

    @abstractmethod
    async def latest_by_job(self, job_name: str) -> Optional[BuildResult]:
        pass

    @abstractmethod
    async def list_latest_per_job(self) -> List[BuildResult]:
        pass

    @abstractmethod
    async def upsert(self, summary: BuildSummary) -> BuildResult:
        """Create or refresh the header keyed by (job name, build number); notes are kept"""
        pass

    @abstractmethod
    async def update_notes(self, result_id: int, notes: Optional[str]) -> Optional[BuildResult]:
        pass

    @abstractmethod
    async def list_test_records(self, result_id: int) -> List[TestCaseRecord]:
        pass

    @abstractmethod
    async def replace_test_records(self, result_id: int, records: List[TestCaseRecordData]) -> List[TestCaseRecord]:
        pass
