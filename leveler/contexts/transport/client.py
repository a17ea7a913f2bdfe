"""
Report API client.

Thin async wrapper over the report endpoints. Every request goes through the
retry policy; error responses are raised as ApiError subclasses.

Usage:
    async with ReportClient(base_url="https://api.example.com") as client:
        report = await client.fetch_report(report_id)
        orchestrator = SaveOrchestrator(store, report_saver(client, report_id))
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import quote

import httpx

from leveler.contexts.assessment.assessment_data_structure import ReportStatus, Responses
from leveler.contexts.assessment.report import CreateReportInput, UpdateReportInput
from leveler.contexts.transport.errors import NetworkError, NotFoundError, error_from_response
from leveler.contexts.transport.logger import _log_debug
from leveler.contexts.transport.retry import RetryPolicy, call_with_retry
from leveler.utils.settings import load_settings


def report_path(report_id: str) -> str:
    """URL path for a report; the id is percent-encoded ("|" included)."""
    return f"/reports/{quote(report_id, safe='')}"


class ReportClient:
    """
    Async client for the report API.

    Args:
        base_url: API root (defaults to settings api.base_url)
        retry_policy: Backoff parameters (defaults to settings)
        http_client: Pre-built httpx.AsyncClient (tests pass one with a MockTransport)
        headers: Extra request headers (e.g. Authorization)
        sleep: Awaitable sleep used between retries
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = load_settings()
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self._sleep = sleep
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url or settings.api.base_url,
            timeout=settings.api.timeout_s,
            headers=headers,
        )

    async def __aenter__(self) -> "ReportClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send one request (with retries) and return the response's "data" member."""

        async def send_once() -> httpx.Response:
            _log_debug(f"{method} {path}")
            try:
                response = await self._http.request(method, path, json=json)
            except httpx.TransportError as e:
                raise NetworkError(
                    str(e) or type(e).__name__, url=path, method=method
                ) from e
            if response.is_error:
                raise error_from_response(response, str(response.request.url), method)
            return response

        response = await call_with_retry(send_once, self.retry_policy, sleep=self._sleep)
        body = response.json() if response.content else {}
        return body.get("data", body) if isinstance(body, dict) else body

    async def fetch_report(self, report_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a report; None when it does not exist yet."""
        try:
            return await self._request("GET", report_path(report_id))
        except NotFoundError:
            return None

    async def create_report(self, report_input: CreateReportInput) -> Dict[str, Any]:
        return await self._request("POST", "/reports", json=report_input.to_payload())

    async def update_report(
        self, report_id: str, report_input: UpdateReportInput
    ) -> Dict[str, Any]:
        return await self._request(
            "PATCH", report_path(report_id), json=report_input.to_payload()
        )

    async def submit_report(self, report_id: str) -> Dict[str, Any]:
        return await self._request("PUT", f"{report_path(report_id)}/submit", json={})


def report_saver(
    client: ReportClient, report_id: str
) -> Callable[[Responses], Awaitable[Dict[str, Any]]]:
    """
    Build the save function a SaveOrchestrator calls with each responses snapshot.

    Saves are sent as in-progress updates of the given report.
    """

    async def save(responses: Responses) -> Dict[str, Any]:
        return await client.update_report(
            report_id, UpdateReportInput(responses=responses, status=ReportStatus.IN_PROGRESS)
        )

    return save
