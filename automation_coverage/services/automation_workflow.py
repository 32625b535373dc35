from typing import Any, Dict, Optional
import structlog
from automation_coverage.core.exceptions import NotFoundError, ValidationError
from automation_coverage.models.schemas import (
    AutomationCandidate,
    AutomationStatus,
    CandidateStatus,
    LinkedTestCase,
)
from automation_coverage.repositories.interfaces.automation_candidate_repository import IAutomationCandidateRepository
from automation_coverage.repositories.interfaces.issue_repository import IJiraIssueRepository
from automation_coverage.repositories.interfaces.reference_repository import IReferenceDataRepository
from automation_coverage.repositories.interfaces.test_case_link_repository import ITestCaseLinkRepository

logger = structlog.get_logger()

PLACEHOLDER_TEXT = "To be defined during automation implementation"
DEFAULT_CANDIDATE_PRIORITY = "Medium"


def derive_automation_status(can_be_automated: bool, cannot_be_automated: bool) -> AutomationStatus:
    """Status implied by the two flags; "cannot" wins when both are set"""
    if cannot_be_automated:
        return AutomationStatus.CANNOT_AUTOMATE
    if can_be_automated:
        return AutomationStatus.CAN_AUTOMATE
    return AutomationStatus.PENDING


class AutomationReadinessWorkflow:
    """Flag and mapping updates on linked test cases, plus the hand-off of
    automatable ones to the automation queue.

    A linked test case becomes an automation candidate once it is marked
    CAN_AUTOMATE and has both a project and a tester. The hand-off is keyed
    by title, so repeating it refreshes the existing candidate.
    """

    def __init__(
        self,
        link_repository: ITestCaseLinkRepository,
        candidate_repository: IAutomationCandidateRepository,
        reference_repository: IReferenceDataRepository,
        issue_repository: IJiraIssueRepository,
    ):
        self.link_repository = link_repository
        self.candidate_repository = candidate_repository
        self.reference_repository = reference_repository
        self.issue_repository = issue_repository

    async def _require_link(self, link_id: int) -> LinkedTestCase:
        link = await self.link_repository.get_by_id(link_id)
        if link is None:
            raise NotFoundError(f"Test case {link_id} not found")
        return link

    async def update_flags(self, link_id: int, can_be_automated: bool, cannot_be_automated: bool) -> LinkedTestCase:
        await self._require_link(link_id)
        status = derive_automation_status(can_be_automated, cannot_be_automated)

        updated = await self.link_repository.update(
            link_id,
            {
                "can_be_automated": can_be_automated,
                "cannot_be_automated": cannot_be_automated,
                "automation_status": status,
            },
        )
        logger.info("Updated automation flags", link_id=link_id, automation_status=status.value)

        await self.process_readiness(updated)
        return updated

    async def map_test_case(
        self,
        link_id: int,
        project_id: Optional[int] = None,
        tester_id: Optional[int] = None,
    ) -> LinkedTestCase:
        if project_id is None and tester_id is None:
            raise ValidationError("projectId or testerId is required")

        await self._require_link(link_id)
        fields: Dict[str, Any] = {}

        if project_id is not None:
            project = await self.reference_repository.get_project(project_id)
            if project is None:
                raise NotFoundError(f"Project {project_id} not found")
            fields["project_id"] = project.id
            if project.domain_id is not None:
                domain = await self.reference_repository.get_domain(project.domain_id)
                if domain is not None:
                    fields["domain_mapped"] = domain.name

        if tester_id is not None:
            tester = await self.reference_repository.get_tester(tester_id)
            if tester is None:
                raise NotFoundError(f"Tester {tester_id} not found")
            fields["assigned_tester_id"] = tester.id

        updated = await self.link_repository.update(link_id, fields)
        logger.info("Mapped test case", link_id=link_id, project_id=project_id, tester_id=tester_id)

        await self.process_readiness(updated)
        return updated

    async def process_readiness(self, link: LinkedTestCase) -> Optional[AutomationCandidate]:
        if link.automation_status != AutomationStatus.CAN_AUTOMATE:
            return None

        if link.project_id is None or link.assigned_tester_id is None:
            logger.info(
                "Automation hand-off deferred until project and tester are mapped",
                link_id=link.id,
                project_id=link.project_id,
                tester_id=link.assigned_tester_id,
            )
            return None

        existing = await self.candidate_repository.find_by_title(link.qtest_title)
        if existing:
            candidate = await self.candidate_repository.update(
                existing.id,
                {
                    "status": CandidateStatus.READY_TO_AUTOMATE,
                    "project_id": link.project_id,
                    "tester_id": link.assigned_tester_id,
                },
            )
            logger.info("Refreshed automation candidate", candidate_id=existing.id, title=link.qtest_title)
            return candidate

        issue = await self.issue_repository.get_by_id(link.jira_issue_id)
        issue_key = issue.jira_key if issue else str(link.jira_issue_id)
        candidate = await self.candidate_repository.create(
            {
                "title": link.qtest_title,
                "description": f"Test case imported from Jira issue: {issue_key}",
                "test_steps": PLACEHOLDER_TEXT,
                "expected_result": PLACEHOLDER_TEXT,
                "priority": DEFAULT_CANDIDATE_PRIORITY,
                "status": CandidateStatus.READY_TO_AUTOMATE,
                "project_id": link.project_id,
                "tester_id": link.assigned_tester_id,
            }
        )
        logger.info("Created automation candidate", candidate_id=candidate.id, title=link.qtest_title)
        return candidate
