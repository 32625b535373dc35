import httpx
from typing import Optional, List, Dict, Any
from urllib.parse import quote
import structlog
from automation_coverage.repositories.interfaces.jenkins_service import IJenkinsService
from automation_coverage.config.settings import settings
from automation_coverage.core.http import get_json, get_text

logger = structlog.get_logger()

BUILD_TREE = (
    "number,result,building,timestamp,url,"
    "actions[_class,totalCount,failCount,skipCount],"
    "artifacts[fileName,relativePath]"
)


class JenkinsService(IJenkinsService):
    """Jenkins JSON API implementation of the CI server service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        api_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.jenkins_base_url or "").rstrip("/")
        self.username = username or settings.jenkins_username
        self.api_token = api_token or settings.jenkins_api_token
        self.auth = (self.username, self.api_token) if self.username and self.api_token else None
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=self._transport,
            follow_redirects=True,
        )

    @staticmethod
    def _job_path(job_name: str) -> str:
        return f"/job/{quote(job_name, safe='')}"

    async def list_jobs(self) -> List[Dict[str, Any]]:
        if not self.is_configured():
            logger.warning("Jenkins service not configured")
            return []

        try:
            async with self._client(settings.http_long_timeout) as client:
                data = await get_json(client, "/api/json", params={"tree": "jobs[name,url,color]"})
            jobs = (data or {}).get("jobs") or []
            logger.info("Fetched Jenkins jobs", count=len(jobs))
            return jobs
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error listing Jenkins jobs", error=str(e))
            return []

    async def get_last_build(self, job_name: str) -> Optional[Dict[str, Any]]:
        return await self._get_build_json(job_name, "lastBuild")

    async def get_build(self, job_name: str, build_number: str) -> Optional[Dict[str, Any]]:
        return await self._get_build_json(job_name, str(build_number))

    async def _get_build_json(self, job_name: str, build_ref: str) -> Optional[Dict[str, Any]]:
        if not self.is_configured():
            logger.warning("Jenkins service not configured")
            return None

        try:
            async with self._client(settings.http_long_timeout) as client:
                return await get_json(
                    client,
                    f"{self._job_path(job_name)}/{build_ref}/api/json",
                    params={"tree": BUILD_TREE},
                )
        except httpx.HTTPStatusError as e:
            logger.error(
                "Failed to fetch Jenkins build",
                job_name=job_name,
                build=build_ref,
                status_code=e.response.status_code,
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching Jenkins build", job_name=job_name, build=build_ref, error=str(e))
            return None

    async def get_artifact(self, build_url: str, relative_path: str) -> Optional[str]:
        if not self.is_configured():
            return None

        url = f"{build_url.rstrip('/')}/artifact/{quote(relative_path)}"
        try:
            async with self._client(settings.http_long_timeout) as client:
                return await get_text(client, url)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error downloading build artifact", url=url, error=str(e))
            return None

    async def test_connection(self) -> bool:
        if not self.is_configured():
            return False

        try:
            async with self._client(settings.http_short_timeout) as client:
                await get_json(client, "/api/json", params={"tree": "mode"})
            logger.info("Jenkins connection test successful")
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Jenkins connection test failed", error=str(e))
            return False

    def is_configured(self) -> bool:
        return bool(self.base_url and self.username and self.api_token)
