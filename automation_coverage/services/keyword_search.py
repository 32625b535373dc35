from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import structlog
from automation_coverage.models.schemas import GlobalKeywordSearchResponse, MatchingIssue
from automation_coverage.repositories.interfaces.jira_service import IJiraService
from automation_coverage.services.issue_query import build_keyword_search_query
from automation_coverage.services.rich_text import flatten_rich_text

logger = structlog.get_logger()


def count_keyword_occurrences(text: str, keyword: str) -> int:
    """Case-insensitive, non-overlapping occurrences of ``keyword`` in ``text``"""
    if not text or not keyword:
        return 0
    return text.lower().count(keyword.lower())


def _name_of(value: Any) -> str:
    return str(value.get("name") or "") if isinstance(value, dict) else ""


class GlobalKeywordSearchEngine:
    """Keyword search across the issue tracker, with result tallying"""

    def __init__(self, jira_service: IJiraService):
        self.jira_service = jira_service

    @staticmethod
    def empty_result(keyword: Optional[str]) -> GlobalKeywordSearchResponse:
        return GlobalKeywordSearchResponse(
            keyword=keyword,
            totalCount=0,
            matchingIssues=[],
            searchDate=datetime.now(timezone.utc),
        )

    async def search(self, keyword: Optional[str], project_key: Optional[str] = None) -> GlobalKeywordSearchResponse:
        if not keyword or not keyword.strip() or not self.jira_service.is_configured():
            return self.empty_result(keyword)

        logger.info("Performing global keyword search", keyword=keyword, project_key=project_key)
        data = await self.jira_service.search(build_keyword_search_query(keyword, project_key))
        if not isinstance(data, dict):
            return self.empty_result(keyword)

        matching: List[MatchingIssue] = []
        for raw in data.get("issues") or []:
            if not isinstance(raw, dict) or not raw.get("key"):
                continue
            fields = raw.get("fields") or {}
            priority = fields.get("priority")
            matching.append(
                MatchingIssue(
                    key=str(raw["key"]),
                    summary=fields.get("summary") or "",
                    issueType=_name_of(fields.get("issuetype")),
                    status=_name_of(fields.get("status")),
                    priority=_name_of(priority) if isinstance(priority, dict) else None,
                )
            )

        total = data.get("total")
        total_count = total if isinstance(total, int) else len(matching)
        logger.info("Global search finished", keyword=keyword, total=total_count)
        return GlobalKeywordSearchResponse(
            keyword=keyword,
            totalCount=total_count,
            matchingIssues=matching,
            searchDate=datetime.now(timezone.utc),
        )

    async def count_in_comments(self, issue_key: str, keyword: str) -> int:
        """Occurrences of ``keyword`` across an issue's comments.

        An unconfigured tracker counts zero; fetch failures propagate.
        """
        if not self.jira_service.is_configured():
            return 0

        payload: Dict[str, Any] = await self.jira_service.get_issue_comments(issue_key)
        count = 0
        for comment in payload.get("comments") or []:
            if isinstance(comment, dict):
                count += count_keyword_occurrences(flatten_rich_text(comment.get("body")), keyword)

        logger.debug("Counted keyword in comments", issue_key=issue_key, keyword=keyword, count=count)
        return count
