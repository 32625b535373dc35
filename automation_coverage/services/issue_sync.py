import asyncio
from typing import Iterable, List
from weakref import WeakValueDictionary
import structlog
from automation_coverage.models.schemas import JiraIssue, NormalizedIssue
from automation_coverage.repositories.interfaces.issue_repository import IJiraIssueRepository
from automation_coverage.repositories.interfaces.test_case_link_repository import ITestCaseLinkRepository

logger = structlog.get_logger()

# One critical section per issue key, shared by every coordinator in the process
_issue_locks: "WeakValueDictionary[str, asyncio.Lock]" = WeakValueDictionary()


def _lock_for(jira_key: str) -> asyncio.Lock:
    lock = _issue_locks.get(jira_key)
    if lock is None:
        lock = asyncio.Lock()
        _issue_locks[jira_key] = lock
    return lock


class IssueSyncCoordinator:
    """Upserts normalized issues and reconciles their linked test cases.

    Only issue-tracker fields are overwritten on re-sync. Linked test cases
    are append-only from this path: new titles are added with empty flags,
    existing ones (and the project, tester and flags users set on them) are
    never touched.
    """

    def __init__(
        self,
        issue_repository: IJiraIssueRepository,
        link_repository: ITestCaseLinkRepository,
    ):
        self.issue_repository = issue_repository
        self.link_repository = link_repository

    async def sync_issue(self, issue: NormalizedIssue) -> JiraIssue:
        async with _lock_for(issue.jira_key):
            existing = await self.issue_repository.get_by_key(issue.jira_key)
            if existing is None:
                stored = await self.issue_repository.create(issue)
                logger.info("Created issue from sync", jira_key=issue.jira_key)
            else:
                stored = await self.issue_repository.update_sync_fields(existing.id, issue)
                logger.debug("Updated issue from sync", jira_key=issue.jira_key)

            known_titles = await self.link_repository.titles_for_issue(stored.id)
            added = 0
            for candidate in issue.linked_test_case_titles:
                title = candidate.strip()
                if not title or title in known_titles:
                    continue
                await self.link_repository.create(stored.id, title)
                known_titles.add(title)
                added += 1

            if added:
                logger.info("Linked new test cases", jira_key=issue.jira_key, added=added)

            stored.linked_test_cases = await self.link_repository.list_by_issue(stored.id)
            return stored

    async def sync_issues(self, issues: Iterable[NormalizedIssue]) -> List[JiraIssue]:
        synced = []
        for issue in issues:
            synced.append(await self.sync_issue(issue))
        return synced
