from typing import List, Optional, Any, Dict
import structlog
from automation_coverage.config.settings import settings
from automation_coverage.core.exceptions import NotFoundError, ValidationError
from automation_coverage.models.schemas import (
    AutomationStatus,
    Domain,
    GlobalKeywordSearchResponse,
    JiraIssue,
    LinkedTestCase,
    NormalizedIssue,
    Project,
    Sprint,
    Tester,
)
from automation_coverage.repositories.interfaces.issue_repository import IJiraIssueRepository
from automation_coverage.repositories.interfaces.test_case_link_repository import ITestCaseLinkRepository
from automation_coverage.repositories.interfaces.reference_repository import IReferenceDataRepository
from automation_coverage.repositories.interfaces.jira_service import IJiraService
from automation_coverage.services.automation_workflow import AutomationReadinessWorkflow
from automation_coverage.services.issue_normalizer import normalize_issue
from automation_coverage.services.issue_query import build_sprint_issue_query
from automation_coverage.services.issue_sync import IssueSyncCoordinator
from automation_coverage.services.keyword_search import GlobalKeywordSearchEngine
from automation_coverage.services.pagination import collect_board_sprints, paginate

logger = structlog.get_logger()


def _to_sprint(raw: Dict[str, Any]) -> Optional[Sprint]:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    return Sprint(
        id=str(raw["id"]),
        name=raw.get("name") or "",
        state=raw.get("state") or "",
        startDate=raw.get("startDate"),
        endDate=raw.get("endDate"),
    )


class ManualPageService:
    """Business logic behind the manual test coverage page"""

    def __init__(
        self,
        jira_service: IJiraService,
        issue_repository: IJiraIssueRepository,
        link_repository: ITestCaseLinkRepository,
        reference_repository: IReferenceDataRepository,
        workflow: AutomationReadinessWorkflow,
    ):
        self.jira_service = jira_service
        self.issue_repository = issue_repository
        self.link_repository = link_repository
        self.reference_repository = reference_repository
        self.workflow = workflow
        self.sync_coordinator = IssueSyncCoordinator(issue_repository, link_repository)
        self.keyword_engine = GlobalKeywordSearchEngine(jira_service)

    # --- Sprints and sync ---------------------------------------------------

    async def get_available_sprints(
        self,
        project_key: Optional[str] = None,
        board_id: Optional[str] = None,
    ) -> List[Sprint]:
        board = board_id or settings.jira_board_id
        if not self.jira_service.is_configured() or not board:
            logger.warning("Sprint listing unavailable", jira_configured=self.jira_service.is_configured(), board_id=board)
            return []

        raw_sprints = await collect_board_sprints(
            self.jira_service.get_sprint_page,
            board,
            project_key=project_key or settings.jira_project_key,
            page_size=settings.jira_sprint_page_size,
        )
        sprints = [sprint for sprint in (_to_sprint(raw) for raw in raw_sprints) if sprint]
        logger.info("Fetched sprints", board_id=board, count=len(sprints))
        return sprints

    async def fetch_sprint_issues(
        self,
        sprint_id: str,
        project_key: Optional[str] = None,
        board_id: Optional[str] = None,
    ) -> List[NormalizedIssue]:
        """Every issue of a sprint, normalized; unreadable records are skipped"""
        if not self.jira_service.is_configured():
            logger.warning("JIRA service not configured, no issues to fetch", sprint_id=sprint_id)
            return []

        async def fetch_page(start_at: int, max_results: int) -> Optional[Dict[str, Any]]:
            return await self.jira_service.search(
                build_sprint_issue_query(sprint_id, project_key, start_at=start_at, max_results=max_results)
            )

        raw_issues = await paginate(
            fetch_page,
            items_key="issues",
            page_size=settings.jira_issue_page_size,
            sprint_id=sprint_id,
        )

        board = board_id or settings.jira_board_id
        normalized = []
        for raw in raw_issues:
            try:
                normalized.append(normalize_issue(raw, sprint_id=sprint_id, board_id=board))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning("Skipping unreadable issue", sprint_id=sprint_id, error=str(e))
        return normalized

    async def sync_sprint_issues(
        self,
        sprint_id: str,
        project_key: Optional[str] = None,
        board_id: Optional[str] = None,
    ) -> List[JiraIssue]:
        issues = await self.fetch_sprint_issues(sprint_id, project_key, board_id)
        synced = await self.sync_coordinator.sync_issues(issues)
        logger.info("Synced sprint issues", sprint_id=sprint_id, count=len(synced))
        return [await self._describe_issue(issue) for issue in synced]

    async def get_sprint_issues(self, sprint_id: str) -> List[JiraIssue]:
        issues = await self.issue_repository.list_by_sprint_with_links(sprint_id)
        return [await self._describe_issue(issue) for issue in issues]

    # --- Test case updates --------------------------------------------------

    async def update_automation_flags(
        self,
        link_id: int,
        can_be_automated: bool,
        cannot_be_automated: bool,
    ) -> LinkedTestCase:
        link = await self.workflow.update_flags(link_id, can_be_automated, cannot_be_automated)
        return (await self._describe_links([link]))[0]

    async def map_test_case(
        self,
        link_id: int,
        project_id: Optional[int] = None,
        tester_id: Optional[int] = None,
    ) -> LinkedTestCase:
        link = await self.workflow.map_test_case(link_id, project_id, tester_id)
        return (await self._describe_links([link]))[0]

    # --- Keyword search -----------------------------------------------------

    async def search_keyword_in_issue(self, jira_key: str, keyword: str) -> JiraIssue:
        if not keyword or not keyword.strip():
            raise ValidationError("keyword is required")

        issue = await self.issue_repository.get_by_key(jira_key)
        if issue is None:
            raise NotFoundError(f"Issue {jira_key} not found")

        count = await self.keyword_engine.count_in_comments(jira_key, keyword.strip())
        await self.issue_repository.update_keyword_search(issue.id, keyword.strip(), count)
        logger.info("Stored keyword search result", jira_key=jira_key, keyword=keyword, count=count)

        return await self._describe_issue(await self.issue_repository.get_with_links(jira_key))

    async def global_keyword_search(
        self,
        keyword: Optional[str],
        project_key: Optional[str] = None,
    ) -> GlobalKeywordSearchResponse:
        return await self.keyword_engine.search(keyword, project_key)

    # --- Statistics and reference data --------------------------------------

    async def get_sprint_statistics(self, sprint_id: str) -> Dict[str, Any]:
        links = await self._describe_links(await self.link_repository.list_by_sprint(sprint_id))
        by_status = {status: 0 for status in AutomationStatus}
        breakdown: Dict[str, Dict[str, int]] = {}

        for link in links:
            by_status[link.automation_status] += 1
            project_name = link.project_name or "Unassigned"
            per_project = breakdown.setdefault(project_name, {status.value: 0 for status in AutomationStatus})
            per_project[link.automation_status.value] += 1

        return {
            "sprintId": sprint_id,
            "totalTestCases": len(links),
            "readyToAutomate": by_status[AutomationStatus.CAN_AUTOMATE],
            "notAutomatable": by_status[AutomationStatus.CANNOT_AUTOMATE],
            "pending": by_status[AutomationStatus.PENDING],
            "projectBreakdown": breakdown,
        }

    async def list_projects(self) -> List[Project]:
        return await self.reference_repository.list_projects()

    async def list_domains(self) -> List[Domain]:
        return await self.reference_repository.list_domains()

    async def list_testers(self) -> List[Tester]:
        return await self.reference_repository.list_testers()

    async def test_connection(self) -> bool:
        if not self.jira_service.is_configured():
            return False
        return await self.jira_service.test_connection()

    # --- Helpers ------------------------------------------------------------

    async def _describe_links(self, links: List[LinkedTestCase]) -> List[LinkedTestCase]:
        """Fill in project and tester names for display"""
        project_names: Dict[int, Optional[str]] = {}
        tester_names: Dict[int, Optional[str]] = {}

        for link in links:
            if link.project_id is not None:
                if link.project_id not in project_names:
                    project = await self.reference_repository.get_project(link.project_id)
                    project_names[link.project_id] = project.name if project else None
                link.project_name = project_names[link.project_id]
            if link.assigned_tester_id is not None:
                if link.assigned_tester_id not in tester_names:
                    tester = await self.reference_repository.get_tester(link.assigned_tester_id)
                    tester_names[link.assigned_tester_id] = tester.name if tester else None
                link.assigned_tester_name = tester_names[link.assigned_tester_id]

        return links

    async def _describe_issue(self, issue: JiraIssue) -> JiraIssue:
        issue.linked_test_cases = await self._describe_links(issue.linked_test_cases)
        return issue
