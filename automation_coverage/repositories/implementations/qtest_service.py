import httpx
from typing import Optional, List, Dict, Any
import structlog
from automation_coverage.repositories.interfaces.qtest_service import IQTestService
from automation_coverage.config.settings import settings
from automation_coverage.core.exceptions import ExternalServiceError, QTestAuthenticationError
from automation_coverage.core.http import get_json
from automation_coverage.services.qtest_session import QTestSessionManager

logger = structlog.get_logger()


class QTestService(IQTestService):
    """qTest Manager implementation of the test-management service"""

    def __init__(self, session_manager: Optional[QTestSessionManager] = None, project_id: Optional[str] = None):
        self.sessions = session_manager or QTestSessionManager()
        self.project_id = project_id or settings.qtest_project_id

    async def _get(self, path: str, **kwargs) -> Any:
        headers = await self.sessions.auth_headers()
        async with self.sessions.client(settings.http_long_timeout) as client:
            return await get_json(client, path, headers=headers, **kwargs)

    async def fetch_test_case_details(self, test_case_id: str) -> Dict[str, Any]:
        """Fetch one test case; authentication and transport failures are raised"""
        if not self.sessions.is_configured():
            logger.warning("qTest configuration is incomplete", test_case_id=test_case_id)
            return {}

        try:
            data = await self._get(f"/api/v3/projects/{self.project_id}/test-cases/{test_case_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return {}
            logger.error("Error fetching qTest test case", test_case_id=test_case_id, status_code=e.response.status_code)
            raise ExternalServiceError("qtest", f"test case {test_case_id} returned {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Unexpected error fetching qTest test case", test_case_id=test_case_id, error=str(e))
            raise ExternalServiceError("qtest", str(e))

        return self._parse_test_case(data or {})

    async def search_test_cases_by_title(self, title: str) -> List[Dict[str, Any]]:
        if not title or not title.strip():
            return []

        try:
            data = await self._get(f"/api/v3/projects/{self.project_id}/test-cases", params={"size": 100})
        except QTestAuthenticationError as e:
            logger.error("Cannot search qTest test cases - authentication failed", error=str(e))
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error searching qTest test cases", error=str(e))
            return []

        # the listing is a bare array on some versions and {"items": [...]} on others
        items = data.get("items", []) if isinstance(data, dict) else (data or [])
        needle = title.lower().strip()
        matches = []
        for item in items:
            name = str(item.get("name") or "")
            if needle in name.lower():
                match = {"id": str(item.get("id", "")), "name": name}
                assignee = item.get("assignee")
                if isinstance(assignee, dict):
                    match["assignee"] = assignee.get("username")
                matches.append(match)

        logger.info("Found matching qTest test cases", title=title, count=len(matches))
        return matches

    async def test_connection(self) -> bool:
        try:
            await self.sessions.refresh()
            return True
        except QTestAuthenticationError:
            return False

    @staticmethod
    def _parse_test_case(node: Dict[str, Any]) -> Dict[str, Any]:
        test_case: Dict[str, Any] = {
            "id": str(node.get("id", "")),
            "name": node.get("name", ""),
            "description": node.get("description", ""),
        }

        assignee = node.get("assignee")
        if isinstance(assignee, dict):
            test_case["assignee"] = assignee.get("username")
            test_case["assigneeDisplayName"] = assignee.get("displayName")

        priority = node.get("priority")
        if isinstance(priority, dict):
            test_case["priority"] = priority.get("name")

        for prop in node.get("properties") or []:
            prop = prop or {}
            label = (prop.get("field") or {}).get("label") or prop.get("field_name") or ""
            if label.lower() == "automation status":
                test_case["automationStatus"] = prop.get("field_value")
                break

        return test_case
