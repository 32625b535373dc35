from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import structlog
from automation_coverage.config.settings import settings
from automation_coverage.core.exceptions import NotFoundError
from automation_coverage.models.schemas import (
    BuildResult,
    BuildStatus,
    BuildSummary,
    DetailedTestCasesResponse,
    StatusCounts,
    TestCaseRecord,
)
from automation_coverage.repositories.interfaces.build_result_repository import IBuildResultRepository
from automation_coverage.repositories.interfaces.jenkins_service import IJenkinsService
from automation_coverage.services.testng_parser import count_by_status, parse_reports

logger = structlog.get_logger()

# Jenkins reports NOT_BUILT for skipped or cancelled stages
_STATUS_ALIASES = {"NOT_BUILT": BuildStatus.ABORTED}


def map_build_status(result: Optional[str]) -> Optional[BuildStatus]:
    """Build status for a Jenkins ``result``; ``None`` while the build is running"""
    if not result:
        return None
    key = result.upper()
    if key in _STATUS_ALIASES:
        return _STATUS_ALIASES[key]
    try:
        return BuildStatus(key)
    except ValueError:
        logger.warning("Unknown Jenkins build result", result=result)
        return None


def _test_counts(build: Dict[str, Any]) -> StatusCounts:
    for action in build.get("actions") or []:
        if isinstance(action, dict) and "totalCount" in action:
            total = int(action.get("totalCount") or 0)
            failed = int(action.get("failCount") or 0)
            skipped = int(action.get("skipCount") or 0)
            return StatusCounts(total=total, passed=max(total - failed - skipped, 0), failed=failed, skipped=skipped)
    return StatusCounts()


def summarize_build(job_name: str, build: Dict[str, Any]) -> Optional[BuildSummary]:
    """Normalize a Jenkins build payload, or ``None`` if it has no final result"""
    if build.get("number") is None:
        return None
    status = map_build_status(build.get("result"))
    if status is None:
        return None

    counts = _test_counts(build)
    timestamp = build.get("timestamp")
    return BuildSummary(
        job_name=job_name,
        build_number=str(build["number"]),
        build_status=status,
        total_tests=counts.total,
        passed_tests=counts.passed,
        failed_tests=counts.failed,
        skipped_tests=counts.skipped,
        build_url=build.get("url"),
        build_timestamp=datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc) if timestamp else None,
    )


def _pass_rate(passed: int, total: int) -> float:
    return round(passed * 100.0 / total, 2) if total else 0.0


def _summary_counts(result: BuildResult) -> StatusCounts:
    return StatusCounts(
        total=result.total_tests,
        passed=result.passed_tests,
        failed=result.failed_tests,
        skipped=result.skipped_tests,
    )


class BuildResultSyncCoordinator:
    """Keeps CI build headers in storage and resolves per-test detail on demand.

    Detail for a build is parsed from its archived TestNG reports the first
    time it is asked for and served from storage afterwards.
    """

    def __init__(self, jenkins_service: IJenkinsService, build_result_repository: IBuildResultRepository):
        self.jenkins_service = jenkins_service
        self.repository = build_result_repository

    async def sync_job(self, job_name: str) -> Optional[BuildResult]:
        build = await self.jenkins_service.get_last_build(job_name)
        if not build:
            logger.warning("No last build available", job_name=job_name)
            return None

        summary = summarize_build(job_name, build)
        if summary is None:
            logger.info("Skipping build without a final result", job_name=job_name, build_number=build.get("number"))
            return None

        result = await self.repository.upsert(summary)
        logger.info(
            "Synced build result",
            job_name=job_name,
            build_number=summary.build_number,
            build_status=summary.build_status.value,
        )
        return result

    async def sync_all_jobs(self) -> List[BuildResult]:
        jobs = await self.jenkins_service.list_jobs()
        synced = []
        for job in jobs:
            name = job.get("name") if isinstance(job, dict) else None
            if not name:
                continue
            result = await self.sync_job(name)
            if result:
                synced.append(result)

        logger.info("Synced Jenkins jobs", jobs=len(jobs), synced=len(synced))
        return synced

    async def _fetch_report_documents(self, build: Dict[str, Any]) -> List[Optional[str]]:
        build_url = build.get("url")
        if not build_url:
            return []

        pattern = settings.jenkins_report_pattern
        documents = []
        for artifact in build.get("artifacts") or []:
            file_name = artifact.get("fileName") or ""
            if pattern in file_name and file_name.endswith(".xml"):
                documents.append(await self.jenkins_service.get_artifact(build_url, artifact.get("relativePath") or file_name))
        logger.info("Downloaded result reports", build_url=build_url, count=len(documents))
        return documents

    async def get_detailed_test_cases(self, job_name: str, build_number: str) -> DetailedTestCasesResponse:
        build = None
        result = await self.repository.get_by_job_and_build(job_name, build_number)
        if result is None:
            build = await self.jenkins_service.get_build(job_name, build_number)
            summary = summarize_build(job_name, build) if build else None
            if summary is None:
                raise NotFoundError(f"Build {job_name} #{build_number} not found")
            result = await self.repository.upsert(summary)

        records = await self.repository.list_test_records(result.id)
        source = "stored"
        if not records:
            if build is None:
                build = await self.jenkins_service.get_build(job_name, build_number)
            parsed = parse_reports(await self._fetch_report_documents(build)) if build else []
            if parsed:
                records = await self.repository.replace_test_records(result.id, parsed)
                source = "report"

        counts = count_by_status(records)
        summary_counts = _summary_counts(result)
        if records and counts != summary_counts:
            logger.warning(
                "Parsed test counts differ from build summary",
                job_name=job_name,
                build_number=build_number,
                parsed=counts.model_dump(),
                summary=summary_counts.model_dump(),
            )

        return DetailedTestCasesResponse(
            jobName=job_name,
            buildNumber=str(build_number),
            testCases=records,
            totalCount=counts.total,
            passedCount=counts.passed,
            failedCount=counts.failed,
            skippedCount=counts.skipped,
            summaryCounts=summary_counts,
            countsMatchSummary=counts == summary_counts,
            source=source,
        )

    async def extract_test_cases(self, job_name: str, build_number: str) -> DetailedTestCasesResponse:
        """Refresh the job's latest build, then resolve detail for ``build_number``"""
        await self.sync_job(job_name)
        return await self.get_detailed_test_cases(job_name, build_number)

    async def get_all_latest_results(self) -> List[BuildResult]:
        return await self.repository.list_latest_per_job()

    async def get_latest_result(self, job_name: str) -> BuildResult:
        result = await self.repository.latest_by_job(job_name)
        if result is None:
            raise NotFoundError(f"No results stored for job {job_name}")
        return result

    async def get_result(self, result_id: int) -> BuildResult:
        result = await self.repository.get_by_id(result_id)
        if result is None:
            raise NotFoundError(f"Build result {result_id} not found")
        return result

    async def get_test_records(self, result_id: int) -> List[TestCaseRecord]:
        await self.get_result(result_id)
        return await self.repository.list_test_records(result_id)

    async def update_notes(self, result_id: int, notes: Optional[str]) -> BuildResult:
        result = await self.repository.update_notes(result_id, notes)
        if result is None:
            raise NotFoundError(f"Build result {result_id} not found")
        logger.info("Updated build notes", result_id=result_id)
        return result

    async def get_statistics(self) -> Dict[str, Any]:
        results = await self.repository.list_latest_per_job()
        status_counts = {status.value: 0 for status in BuildStatus}
        totals = StatusCounts()
        for result in results:
            status_counts[result.build_status.value] += 1
            totals.total += result.total_tests
            totals.passed += result.passed_tests
            totals.failed += result.failed_tests
            totals.skipped += result.skipped_tests

        return {
            "totalJobs": len(results),
            "statusCounts": status_counts,
            "totalTests": totals.total,
            "passedTests": totals.passed,
            "failedTests": totals.failed,
            "skippedTests": totals.skipped,
            "passRate": _pass_rate(totals.passed, totals.total),
        }

    async def generate_report(self) -> Dict[str, Any]:
        results = await self.repository.list_latest_per_job()
        statistics = await self.get_statistics()
        jobs = [
            {
                "jobName": r.job_name,
                "buildNumber": r.build_number,
                "buildStatus": r.build_status.value,
                "totalTests": r.total_tests,
                "passedTests": r.passed_tests,
                "failedTests": r.failed_tests,
                "skippedTests": r.skipped_tests,
                "passRate": _pass_rate(r.passed_tests, r.total_tests),
                "buildUrl": r.build_url,
                "buildTimestamp": r.build_timestamp.isoformat() if r.build_timestamp else None,
                "notes": r.notes,
            }
            for r in results
        ]
        return {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "statistics": statistics,
            "jobs": jobs,
        }
