"""Tests for TurfApiClient against an httpx mock transport"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from turfboard.client import ApiError, ForbiddenError, NotFoundError, ServerError, TurfApiClient, ValidationError


def run_async(coro):
    """Helper to run async coroutine in sync test."""
    return asyncio.run(coro)


class Recorder:
    """Mock transport handler that records requests and replays responses"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_client(handler, **kwargs) -> TurfApiClient:
    kwargs.setdefault("retry_delay", 0)
    return TurfApiClient("http://turf.test", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.unit
class TestRequests:
    def test_list_logins_sends_identity_and_filter(self) -> None:
        recorder = Recorder(httpx.Response(200, json=[{"slug": "a"}]))

        async def scenario():
            async with make_client(recorder, user_email="ana@example.com") as client:
                return await client.list_logins(organization_id=3)

        assert run_async(scenario()) == [{"slug": "a"}]
        request = recorder.requests[0]
        assert request.url.path == "/api/logins"
        assert request.url.params["organizationId"] == "3"
        assert request.headers["X-User-Email"] == "ana@example.com"

    def test_anonymous_client_sends_no_identity(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"count": 0}))

        async def scenario():
            async with make_client(recorder) as client:
                return await client.summary()

        run_async(scenario())
        assert "X-User-Email" not in recorder.requests[0].headers

    def test_update_login_patches_both_counters(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"slug": "a", "onTurf": 7, "offTurf": 3}))

        async def scenario():
            async with make_client(recorder) as client:
                return await client.update_login("a", 7, 3)

        assert run_async(scenario())["onTurf"] == 7
        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/logins/a"
        assert json.loads(request.content) == {"onTurf": 7, "offTurf": 3}

    def test_import_logins_body(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"created": 1}))

        async def scenario():
            async with make_client(recorder) as client:
                return await client.import_logins([{"login": "Zed"}], organization_id=2)

        run_async(scenario())
        assert json.loads(recorder.requests[0].content) == {"plans": [{"login": "Zed"}], "organizationId": 2}


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.parametrize(
        "status_code, error_class",
        [(400, ValidationError), (403, ForbiddenError), (404, NotFoundError), (500, ServerError), (409, ApiError)],
    )
    def test_status_codes(self, status_code, error_class) -> None:
        recorder = Recorder(httpx.Response(status_code, json={"message": "nope"}))

        async def scenario():
            async with make_client(recorder, retries=0) as client:
                await client.get_login("a")

        with pytest.raises(error_class) as exc_info:
            run_async(scenario())
        assert exc_info.value.status_code == status_code
        assert exc_info.value.message == "nope"

    def test_non_json_error_body(self) -> None:
        recorder = Recorder(httpx.Response(502, text="Bad Gateway"))

        async def scenario():
            async with make_client(recorder, retries=0) as client:
                await client.organizations()

        with pytest.raises(ServerError) as exc_info:
            run_async(scenario())
        assert exc_info.value.message == "Bad Gateway"


@pytest.mark.unit
class TestRetries:
    def test_get_retried_on_503(self) -> None:
        recorder = Recorder(httpx.Response(503, json={"message": "busy"}), httpx.Response(200, json=[]))

        async def scenario():
            async with make_client(recorder, retries=2) as client:
                return await client.user_organizations()

        assert run_async(scenario()) == []
        assert len(recorder.requests) == 2

    def test_patch_never_retried(self) -> None:
        recorder = Recorder(httpx.Response(503, json={"message": "busy"}))

        async def scenario():
            async with make_client(recorder, retries=3) as client:
                await client.update_login("a", 1, 1)

        with pytest.raises(ServerError):
            run_async(scenario())
        assert len(recorder.requests) == 1

    def test_network_error_becomes_server_error(self) -> None:
        recorder = Recorder(httpx.ConnectError("connection refused"))

        async def scenario():
            async with make_client(recorder, retries=1) as client:
                await client.list_logins()

        with pytest.raises(ServerError) as exc_info:
            run_async(scenario())
        assert exc_info.value.status_code == 0
        assert len(recorder.requests) == 2
