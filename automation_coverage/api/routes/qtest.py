from typing import Any, Dict, List
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from automation_coverage.core.dependencies import get_qtest_service
from automation_coverage.core.exceptions import AutomationCoverageError, to_http_exception
from automation_coverage.repositories.interfaces.qtest_service import IQTestService

logger = structlog.get_logger()

router = APIRouter(prefix="/qtest", tags=["qtest"])


@router.get("/test-connection")
async def test_connection(qtest_service: IQTestService = Depends(get_qtest_service)):
    connected = await qtest_service.test_connection()
    return {"connected": connected, "service": "qtest"}


@router.get("/test-cases/search", response_model=List[Dict[str, Any]])
async def search_test_cases(
    title: str = Query(..., min_length=1),
    qtest_service: IQTestService = Depends(get_qtest_service),
):
    """Test cases whose name contains ``title``"""
    return await qtest_service.search_test_cases_by_title(title)


@router.get("/test-cases/{test_case_id}")
async def get_test_case(
    test_case_id: str,
    qtest_service: IQTestService = Depends(get_qtest_service),
):
    try:
        details = await qtest_service.fetch_test_case_details(test_case_id)
    except AutomationCoverageError as e:
        logger.error("Failed to fetch qTest test case", test_case_id=test_case_id, error=str(e))
        raise to_http_exception(e)

    if not details:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"qTest test case {test_case_id} not found"
        )
    return details
