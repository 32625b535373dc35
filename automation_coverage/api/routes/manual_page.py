from typing import List, Optional
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from automation_coverage.core.dependencies import get_manual_page_service
from automation_coverage.core.exceptions import AutomationCoverageError, to_http_exception
from automation_coverage.models.schemas import (
    AutomationFlagsRequest,
    Domain,
    GlobalKeywordSearchRequest,
    GlobalKeywordSearchResponse,
    JiraIssue,
    KeywordSearchRequest,
    LinkedTestCase,
    Project,
    Sprint,
    TestCaseMappingRequest,
    Tester,
)
from automation_coverage.services.manual_page_service import ManualPageService

logger = structlog.get_logger()

router = APIRouter(prefix="/manual-page", tags=["manual-page"])


@router.get("/sprints", response_model=List[Sprint])
async def get_sprints(
    jiraProjectKey: Optional[str] = Query(None),
    jiraBoardId: Optional[str] = Query(None),
    service: ManualPageService = Depends(get_manual_page_service),
):
    """List the sprints of a board"""
    try:
        return await service.get_available_sprints(jiraProjectKey, jiraBoardId)
    except Exception as e:
        logger.error("Failed to fetch sprints", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sprints"
        )


@router.post("/sprints/{sprint_id}/sync", response_model=List[JiraIssue])
async def sync_sprint(
    sprint_id: str,
    jiraProjectKey: Optional[str] = Query(None),
    jiraBoardId: Optional[str] = Query(None),
    service: ManualPageService = Depends(get_manual_page_service),
):
    """Pull every issue of a sprint and store it with its linked test cases"""
    try:
        logger.info("Syncing sprint", sprint_id=sprint_id, project_key=jiraProjectKey)
        return await service.sync_sprint_issues(sprint_id, jiraProjectKey, jiraBoardId)
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to sync sprint", sprint_id=sprint_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sync sprint {sprint_id}"
        )


@router.get("/sprints/{sprint_id}/issues", response_model=List[JiraIssue])
async def get_sprint_issues(
    sprint_id: str,
    service: ManualPageService = Depends(get_manual_page_service),
):
    try:
        return await service.get_sprint_issues(sprint_id)
    except Exception as e:
        logger.error("Failed to fetch sprint issues", sprint_id=sprint_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch issues for sprint {sprint_id}"
        )


@router.get("/sprints/{sprint_id}/statistics")
async def get_sprint_statistics(
    sprint_id: str,
    service: ManualPageService = Depends(get_manual_page_service),
):
    """Automation readiness totals for the linked test cases of a sprint"""
    try:
        return await service.get_sprint_statistics(sprint_id)
    except Exception as e:
        logger.error("Failed to compute sprint statistics", sprint_id=sprint_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute statistics for sprint {sprint_id}"
        )


@router.put("/test-cases/{test_case_id}/automation-flags", response_model=LinkedTestCase)
async def update_automation_flags(
    test_case_id: int,
    request: AutomationFlagsRequest,
    service: ManualPageService = Depends(get_manual_page_service),
):
    try:
        return await service.update_automation_flags(
            test_case_id, request.canBeAutomated, request.cannotBeAutomated
        )
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to update automation flags", test_case_id=test_case_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update test case {test_case_id}"
        )


@router.put("/test-cases/{test_case_id}/mapping", response_model=LinkedTestCase)
async def map_test_case(
    test_case_id: int,
    request: TestCaseMappingRequest,
    service: ManualPageService = Depends(get_manual_page_service),
):
    """Assign a project and/or tester to a linked test case"""
    try:
        return await service.map_test_case(test_case_id, request.projectId, request.testerId)
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to map test case", test_case_id=test_case_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to map test case {test_case_id}"
        )


@router.post("/issues/{jira_key}/keyword-search", response_model=JiraIssue)
async def search_keyword_in_issue(
    jira_key: str,
    request: KeywordSearchRequest,
    service: ManualPageService = Depends(get_manual_page_service),
):
    """Count keyword occurrences in an issue's comments and store the result"""
    try:
        return await service.search_keyword_in_issue(jira_key, request.keyword)
    except AutomationCoverageError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Keyword search failed", jira_key=jira_key, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Keyword search failed for {jira_key}"
        )


@router.post("/global-keyword-search", response_model=GlobalKeywordSearchResponse)
async def global_keyword_search(
    request: GlobalKeywordSearchRequest,
    service: ManualPageService = Depends(get_manual_page_service),
):
    try:
        return await service.global_keyword_search(request.keyword, request.jiraProjectKey)
    except Exception as e:
        logger.error("Global keyword search failed", keyword=request.keyword, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Global keyword search failed"
        )


@router.get("/projects", response_model=List[Project])
async def get_projects(service: ManualPageService = Depends(get_manual_page_service)):
    return await service.list_projects()


@router.get("/domains", response_model=List[Domain])
async def get_domains(service: ManualPageService = Depends(get_manual_page_service)):
    return await service.list_domains()


@router.get("/testers", response_model=List[Tester])
async def get_testers(service: ManualPageService = Depends(get_manual_page_service)):
    return await service.list_testers()


@router.get("/test-connection")
async def test_connection(service: ManualPageService = Depends(get_manual_page_service)):
    """Check that the issue tracker is reachable with the configured credentials"""
    connected = await service.test_connection()
    return {"connected": connected, "service": "jira"}
