from typing import List
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from automation_coverage.core.dependencies import get_build_result_coordinator, get_jenkins_service
from automation_coverage.core.exceptions import AutomationCoverageError, to_http_exception
from automation_coverage.models.schemas import (
    BuildResult,
    DetailedTestCasesResponse,
    NotesUpdateRequest,
    TestCaseRecord,
)
from automation_coverage.repositories.interfaces.jenkins_service import IJenkinsService
from automation_coverage.services.build_result_service import BuildResultSyncCoordinator

logger = structlog.get_logger()

router = APIRouter(prefix="/jenkins", tags=["jenkins"])


@router.get("/test-connection")
async def test_connection(jenkins_service: IJenkinsService = Depends(get_jenkins_service)):
    connected = await jenkins_service.test_connection()
    return {"connected": connected, "service": "jenkins"}


@router.get("/results", response_model=List[BuildResult])
async def get_latest_results(coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator)):
    """Latest stored build result of every job"""
    return await coordinator.get_all_latest_results()


@router.get("/statistics")
async def get_statistics(coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator)):
    return await coordinator.get_statistics()


@router.get("/results/{job_name}", response_model=BuildResult)
async def get_latest_result_for_job(
    job_name: str,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    try:
        return await coordinator.get_latest_result(job_name)
    except AutomationCoverageError as e:
        raise to_http_exception(e)


@router.get("/results/{result_id}/testcases", response_model=List[TestCaseRecord])
async def get_result_test_cases(
    result_id: int,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    try:
        return await coordinator.get_test_records(result_id)
    except AutomationCoverageError as e:
        raise to_http_exception(e)


@router.get("/results/{result_id}/notes")
async def get_notes(
    result_id: int,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    try:
        result = await coordinator.get_result(result_id)
        return {"id": result.id, "notes": result.notes}
    except AutomationCoverageError as e:
        raise to_http_exception(e)


@router.put("/results/{result_id}/notes", response_model=BuildResult)
async def update_notes(
    result_id: int,
    request: NotesUpdateRequest,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    try:
        return await coordinator.update_notes(result_id, request.notes)
    except AutomationCoverageError as e:
        raise to_http_exception(e)


@router.post("/sync", response_model=List[BuildResult])
async def sync_all_jobs(coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator)):
    """Store the last build of every job"""
    try:
        return await coordinator.sync_all_jobs()
    except Exception as e:
        logger.error("Failed to sync Jenkins jobs", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sync Jenkins jobs"
        )


@router.post("/sync/{job_name}", response_model=BuildResult)
async def sync_job(
    job_name: str,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    result = await coordinator.sync_job(job_name)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No completed build found for job {job_name}"
        )
    return result


@router.get("/testng/report")
async def get_testng_report(coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator)):
    return await coordinator.generate_report()


@router.get("/testng/{job_name}/{build_number}/testcases", response_model=DetailedTestCasesResponse)
async def get_detailed_test_cases(
    job_name: str,
    build_number: str,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    """Per-test detail of one build, parsed from its result reports on first request"""
    try:
        return await coordinator.get_detailed_test_cases(job_name, build_number)
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to resolve test cases", job_name=job_name, build_number=build_number, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to resolve test cases for {job_name} #{build_number}"
        )


@router.post("/extract-testcases/{job_name}/{build_number}", response_model=DetailedTestCasesResponse)
async def extract_test_cases(
    job_name: str,
    build_number: str,
    coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator),
):
    try:
        return await coordinator.extract_test_cases(job_name, build_number)
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to extract test cases", job_name=job_name, build_number=build_number, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to extract test cases for {job_name} #{build_number}"
        )


@router.post("/testng/sync-and-report")
async def sync_and_report(coordinator: BuildResultSyncCoordinator = Depends(get_build_result_coordinator)):
    """Sync every job, then return the aggregated report"""
    try:
        synced = await coordinator.sync_all_jobs()
        report = await coordinator.generate_report()
        report["syncedJobs"] = len(synced)
        return report
    except Exception as e:
        logger.error("Failed to sync and report", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sync Jenkins results"
        )
