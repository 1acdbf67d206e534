"""HTTP transport for the report service.

One WildWasteApi wraps a single shared httpx.AsyncClient and is injected into
every state machine. Calls return the raw status and body; turning them into
successes or failures is the state layer's job.
"""

import sys
from dataclasses import dataclass

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from wildwaste.config import get_config
from wildwaste.models import ReportDraft, Scope


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _is_connection_failure(exc: BaseException) -> bool:
    """Return True if the request never reached the server and is safe to resend."""
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


class WildWasteApi:
    """Async client for login, registration and report CRUD."""

    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None):
        config = get_config()
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url or config["base_url"],
                timeout=httpx.Timeout(config["read_timeout"], connect=config["connect_timeout"]),
            )
        self._client = client

    async def __aenter__(self) -> "WildWasteApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> ApiResponse:
        """Send a request, resending only when the connection itself failed.

        Raises the last httpx error once connection retries are exhausted,
        and any other transport error immediately.
        """
        config = get_config()
        retries = config.get("connect_retries", 2)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
            wait=wait_exponential(multiplier=1, min=0, max=config.get("retry_wait_max", 8)),
            retry=retry_if_exception(_is_connection_failure),
            reraise=True,
            before_sleep=lambda state: print(
                f"[WildWaste] Connection failed: {state.outcome.exception()!r}. "
                f"Retrying in {state.next_action.sleep:.0f}s "
                f"(attempt {state.attempt_number}/{retries})...",
                file=sys.stderr,
            ),
        ):
            with attempt:
                response = await self._client.request(method, path, **kwargs)

        return ApiResponse(status_code=response.status_code, text=response.text)

    async def login(self, username: str, password: str) -> ApiResponse:
        return await self._request("POST", "login", json={"username": username, "password": password})

    async def register(self, username: str, password: str) -> ApiResponse:
        return await self._request("POST", "register", json={"username": username, "password": password})

    async def list_reports(self, scope: Scope) -> ApiResponse:
        if scope.is_all:
            return await self._request("GET", "reports")
        return await self._request("GET", f"reports/user/{scope.user_id}")

    async def submit_report(self, draft: ReportDraft) -> ApiResponse:
        return await self._request("POST", "reports", json=draft.to_wire())

    async def delete_report(self, report_id: int) -> ApiResponse:
        return await self._request("DELETE", f"reports/{report_id}")
