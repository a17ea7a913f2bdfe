"""
Integration tests for the report API client.

Drives ReportClient and SaveOrchestrator end to end against an
httpx.MockTransport standing in for the report API. Retry sleeps are
recorded instead of awaited.
"""

import asyncio
import json

import httpx
import pytest

from leveler.contexts.assessment import (
    AssessmentStateStore,
    AssessmentType,
    CreateReportInput,
    Failed,
    SaveOrchestrator,
    Saved,
    UpdateReportInput,
)
from leveler.contexts.transport import NetworkError, ReportClient, RetryPolicy, report_saver
from leveler.contexts.transport.errors import ConflictError

REPORT_ID = "ada@example.com|2025-H2|self"


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeReportApi:
    """
    Serves queued responses and records every request it receives.

    The last queued response (or error) repeats once the queue runs down.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )


def make_client(api, sleep):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(api), base_url="http://reports.test"
    )
    return ReportClient(retry_policy=RetryPolicy(), http_client=http_client, sleep=sleep)


def make_store():
    store = AssessmentStateStore()
    store.select("Tech", "Coding", 2, evidence="did X", next_level_feedback="do Y")
    return store


def unavailable():
    return httpx.Response(503, json={"success": False, "error": {"message": "Try later"}})


@pytest.mark.integration
def test_save_recovers_from_transient_outage():
    """Three 503s then success: saved after 1s, 2s and 4s backoff."""
    api = FakeReportApi(
        [
            unavailable(),
            unavailable(),
            unavailable(),
            httpx.Response(200, json={"success": True, "data": {"id": REPORT_ID}}),
        ]
    )
    sleep = RecordingSleep()

    async def scenario():
        async with make_client(api, sleep) as client:
            orchestrator = SaveOrchestrator(
                make_store(), report_saver(client, REPORT_ID), auto_save_interval_ms=30000
            )
            return await orchestrator.save_now()

    state = asyncio.run(scenario())

    assert isinstance(state, Saved)
    assert len(api.requests) == 4
    assert sleep.delays == [1.0, 2.0, 4.0]

    request = api.requests[-1]
    assert request.method == "PATCH"
    assert request.url.path == f"/reports/{REPORT_ID}"
    assert json.loads(request.content) == {
        "responses": {
            "Tech|Coding": {"selectedLevel": 2, "feedback": "Evidence: did X\nNext: do Y"}
        },
        "status": "in_progress",
    }


@pytest.mark.integration
def test_save_fails_fast_on_client_error():
    """A 400 is not retried; the save ends Failed with the API's message."""
    api = FakeReportApi(
        [httpx.Response(400, json={"message": "Invalid level", "code": "VALIDATION"})]
    )
    sleep = RecordingSleep()

    async def scenario():
        async with make_client(api, sleep) as client:
            orchestrator = SaveOrchestrator(
                make_store(), report_saver(client, REPORT_ID), auto_save_interval_ms=30000
            )
            return await orchestrator.save_now()

    state = asyncio.run(scenario())

    assert isinstance(state, Failed)
    assert state.error == "Invalid level"
    assert len(api.requests) == 1
    assert sleep.delays == []


@pytest.mark.integration
def test_save_fails_after_retries_exhausted():
    api = FakeReportApi([unavailable()])
    sleep = RecordingSleep()

    async def scenario():
        async with make_client(api, sleep) as client:
            orchestrator = SaveOrchestrator(
                make_store(), report_saver(client, REPORT_ID), auto_save_interval_ms=30000
            )
            return await orchestrator.save_now()

    state = asyncio.run(scenario())

    assert state.error == "Try later"
    assert len(api.requests) == 4
    assert sleep.delays == [1.0, 2.0, 4.0]


@pytest.mark.integration
def test_network_errors_retried_then_raised():
    api = FakeReportApi([httpx.ConnectError("Connection refused")])
    sleep = RecordingSleep()

    async def scenario():
        async with make_client(api, sleep) as client:
            await client.update_report(REPORT_ID, UpdateReportInput())

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 0
    assert exc_info.value.method == "PATCH"
    assert len(api.requests) == 4
    assert sleep.delays == [1.0, 2.0, 4.0]


@pytest.mark.integration
def test_fetch_report_unwraps_data():
    api = FakeReportApi(
        [httpx.Response(200, json={"success": True, "data": {"id": REPORT_ID, "responses": {}}})]
    )

    async def scenario():
        async with make_client(api, RecordingSleep()) as client:
            return await client.fetch_report(REPORT_ID)

    assert asyncio.run(scenario()) == {"id": REPORT_ID, "responses": {}}
    assert api.requests[0].method == "GET"


@pytest.mark.integration
def test_fetch_missing_report_returns_none():
    api = FakeReportApi([httpx.Response(404, json={"error": {"message": "Report not found"}})])
    sleep = RecordingSleep()

    async def scenario():
        async with make_client(api, sleep) as client:
            return await client.fetch_report(REPORT_ID)

    assert asyncio.run(scenario()) is None
    assert len(api.requests) == 1
    assert sleep.delays == []


@pytest.mark.integration
def test_create_report_posts_payload():
    api = FakeReportApi([httpx.Response(201, json={"data": {"id": REPORT_ID}})])

    async def scenario():
        async with make_client(api, RecordingSleep()) as client:
            return await client.create_report(
                CreateReportInput(
                    user_id="ada@example.com",
                    assessment_id="2025-H2",
                    assessment_type=AssessmentType.SELF,
                    assessor_id="ada@example.com",
                )
            )

    assert asyncio.run(scenario()) == {"id": REPORT_ID}

    request = api.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/reports"
    assert json.loads(request.content) == {
        "userId": "ada@example.com",
        "assessmentId": "2025-H2",
        "type": "self",
        "assessorId": "ada@example.com",
    }


@pytest.mark.integration
def test_submit_report():
    api = FakeReportApi([httpx.Response(200, json={"data": {"status": "submitted"}})])

    async def scenario():
        async with make_client(api, RecordingSleep()) as client:
            return await client.submit_report(REPORT_ID)

    assert asyncio.run(scenario()) == {"status": "submitted"}
    assert api.requests[0].method == "PUT"
    assert api.requests[0].url.path == f"/reports/{REPORT_ID}/submit"


@pytest.mark.integration
def test_conflict_surfaces_as_client_error():
    api = FakeReportApi([httpx.Response(409, json={"message": "Report already exists"})])

    async def scenario():
        async with make_client(api, RecordingSleep()) as client:
            await client.create_report(
                CreateReportInput("u", "a", AssessmentType.MANAGER, assessor_id="m")
            )

    with pytest.raises(ConflictError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.message == "Report already exists"
    assert len(api.requests) == 1
