import httpx
from typing import Optional, Dict, Any
import structlog
from automation_coverage.repositories.interfaces.jira_service import IJiraService
from automation_coverage.config.settings import settings
from automation_coverage.core.exceptions import ExternalServiceError
from automation_coverage.core.http import get_json

logger = structlog.get_logger()


class AtlassianJiraService(IJiraService):
    """Atlassian JIRA (REST v2 + Agile v1) implementation of JIRA service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        api_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.jira_base_url or "").rstrip("/")
        self.username = username or settings.jira_username
        self.api_token = api_token or settings.jira_api_token
        self.auth = (self.username, self.api_token) if self.username and self.api_token else None
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=timeout,
            transport=self._transport,
        )

    async def get_sprint_page(self, board_id: str, start_at: int, max_results: int) -> Optional[Dict[str, Any]]:
        """Fetch one page of sprints for a board"""
        if not self.is_configured():
            logger.warning("JIRA service not configured")
            return None

        try:
            async with self._client(settings.http_long_timeout) as client:
                return await get_json(
                    client,
                    f"/rest/agile/1.0/board/{board_id}/sprint",
                    params={"startAt": start_at, "maxResults": max_results},
                )
        except httpx.HTTPStatusError as e:
            logger.error(
                "Failed to fetch sprint page",
                board_id=board_id,
                start_at=start_at,
                status_code=e.response.status_code,
                response=e.response.text[:500],
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching sprint page", board_id=board_id, start_at=start_at, error=str(e))
            return None

    async def search(self, search_url: str) -> Optional[Dict[str, Any]]:
        """Run a prepared issue search URL"""
        if not self.is_configured():
            logger.warning("JIRA service not configured")
            return None

        try:
            async with self._client(settings.http_long_timeout) as client:
                return await get_json(client, search_url)
        except httpx.HTTPStatusError as e:
            logger.error(
                "JIRA search failed",
                status_code=e.response.status_code,
                response=e.response.text[:500],
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error running JIRA search", error=str(e))
            return None

    async def get_issue_comments(self, issue_key: str) -> Dict[str, Any]:
        """Fetch the comments of an issue; failures are raised to the caller"""
        if not self.is_configured():
            logger.warning("JIRA service not configured")
            return {"comments": []}

        try:
            async with self._client(settings.http_comment_timeout) as client:
                return await get_json(client, f"/rest/api/2/issue/{issue_key}/comment") or {"comments": []}
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Failed to fetch issue comments",
                issue_key=issue_key,
                status_code=e.response.status_code,
            )
            raise ExternalServiceError("jira", f"comments for {issue_key} returned {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error fetching issue comments", issue_key=issue_key, error=str(e))
            raise ExternalServiceError("jira", f"comments for {issue_key} unavailable: {e}")

    async def test_connection(self) -> bool:
        if not self.is_configured():
            return False

        try:
            async with self._client(settings.http_short_timeout) as client:
                await get_json(client, "/rest/api/2/myself")
            logger.info("JIRA connection test successful")
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error("JIRA connection test failed", error=str(e))
            return False

    def is_configured(self) -> bool:
        """Check if JIRA service is properly configured"""
        return bool(self.base_url and self.username and self.api_token)
