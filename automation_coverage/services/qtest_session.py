import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import httpx
import structlog
from automation_coverage.config.settings import settings
from automation_coverage.core.exceptions import QTestAuthenticationError

logger = structlog.get_logger()

Clock = Callable[[], float]


@dataclass(frozen=True)
class QTestSession:
    """Bearer token plus the moment it must be renewed (epoch seconds)"""

    access_token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return bool(self.access_token) and now < self.expires_at


class QTestSessionManager:
    """Owns the qTest bearer token and renews it before it lapses.

    The renewal boundary is ``qtest_token_refresh_minutes`` after login, kept
    below the real token lifetime. ``clock`` is injectable so expiry can be
    driven deterministically.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        refresh_after_seconds: Optional[float] = None,
        clock: Clock = time.time,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.qtest_base_url or "").rstrip("/")
        self.username = username or settings.qtest_username
        self.password = password or settings.qtest_password
        self.refresh_after_seconds = (
            refresh_after_seconds
            if refresh_after_seconds is not None
            else settings.qtest_token_refresh_minutes * 60
        )
        self._clock = clock
        self._transport = transport
        self._session: Optional[QTestSession] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def session(self) -> Optional[QTestSession]:
        return self._session

    def is_configured(self) -> bool:
        return bool(self.base_url and self.username and self.password)

    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.is_valid(self._clock())

    def client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=timeout,
            transport=self._transport,
        )

    async def refresh(self) -> QTestSession:
        """Log in and replace the cached session"""
        if not self.is_configured():
            logger.warning("qTest configuration is incomplete")
            raise QTestAuthenticationError("qTest is not configured")

        logger.info("Logging in to qTest", username=self.username)
        try:
            async with self.client(settings.http_long_timeout) as client:
                response = await client.post(
                    "/api/login",
                    json={"username": self.username, "password": self.password},
                )
                response.raise_for_status()
                token = (response.json() or {}).get("access_token")
        except httpx.HTTPStatusError as e:
            logger.error("qTest login failed", status_code=e.response.status_code, response=e.response.text[:500])
            raise QTestAuthenticationError(f"login returned {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Unexpected error during qTest login", error=str(e))
            raise QTestAuthenticationError(str(e))

        if not token:
            raise QTestAuthenticationError("login response carried no access token")

        self._session = QTestSession(access_token=token, expires_at=self._clock() + self.refresh_after_seconds)
        logger.info("Logged in to qTest")
        return self._session

    async def ensure_session(self) -> QTestSession:
        # built on first use so it binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self._session is None or not self._session.is_valid(self._clock()):
                return await self.refresh()
            return self._session

    async def auth_headers(self) -> Dict[str, str]:
        session = await self.ensure_session()
        return {"Authorization": f"Bearer {session.access_token}"}
