import asyncio
import io
import time
import json
import logging

import httpx
import pytest
import respx
from httpx import Response
from opsmngr.core.client import OpsManagerClient
from opsmngr.core.config import ClientConfigBuilder
from opsmngr.core.context import RequestContext
from opsmngr.core.errors import (
    ContextCanceledError,
    DeadlineExceededError,
    OpsManagerClientError,
    OpsManagerHTTPError,
    OpsManagerModelValidationError,
    OpsManagerParseError,
    OpsManagerTransportError,
    RequestBuildError,
)
from opsmngr.models import Project, Projects

BASE = "https://om.example.com/"
GROUPS_URL = "https://om.example.com/api/public/v1.0/groups"


def make_client(**builder_calls) -> OpsManagerClient:
    builder = ClientConfigBuilder().base_url(BASE)
    for name, value in builder_calls.items():
        getattr(builder, name)(value)
    return OpsManagerClient(config=builder.build())


# --- Request builders ---


def test_new_request_resolves_relative_path():
    client = make_client()
    req = client.new_request("get", "api/public/v1.0/groups")
    assert req.method == "GET"
    assert str(req.url) == GROUPS_URL


def test_base_url_without_trailing_slash_keeps_its_path():
    client = OpsManagerClient(
        config=ClientConfigBuilder().base_url("https://om.example.com/prefix").build()
    )
    req = client.new_request("GET", "api/public/v1.0/groups")
    assert str(req.url) == "https://om.example.com/prefix/api/public/v1.0/groups"


def test_content_type_only_with_body():
    client = make_client()
    without_body = client.new_request("GET", "api/public/v1.0/groups")
    with_body = client.new_request("POST", "api/public/v1.0/groups", Project(name="p"))

    assert "Content-Type" not in without_body.headers
    assert without_body.headers["Accept"] == "application/json"
    assert with_body.headers["Content-Type"] == "application/json"
    assert with_body.headers["Accept"] == "application/json"


def test_body_uses_aliases_and_drops_unset_fields():
    client = make_client()
    req = client.new_request(
        "POST", "api/public/v1.0/groups", Project(name="p1", org_id="o1")
    )
    assert json.loads(req.content) == {"name": "p1", "orgId": "o1"}


def test_body_keeps_html_characters_literal():
    client = make_client()
    req = client.new_request(
        "POST", "api/public/v1.0/groups", {"filter": {"$gt": "<a & b>"}}
    )
    assert b'"<a & b>"' in req.content
    assert b"\\u003c" not in req.content


def test_unencodable_body_raises_build_error():
    client = make_client()
    with pytest.raises(RequestBuildError):
        client.new_request("POST", "api/public/v1.0/groups", {"x": object()})


def test_gzip_and_plain_requests_set_accept():
    client = make_client()
    gz = client.new_gzip_request("GET", "api/public/v1.0/admin/diagnostics")
    plain = client.new_plain_request("GET", "api/private/unauth/version")
    assert gz.headers["Accept"] == "application/gzip"
    assert plain.headers["Accept"] == "text/plain"
    assert not gz.content
    assert "Content-Type" not in plain.headers


def test_user_agent_is_prepended():
    client = make_client(user_agent="my-tool/1.0")
    req = client.new_request("GET", "api/public/v1.0/groups")
    ua = req.headers["User-Agent"]
    assert ua.startswith("my-tool/1.0 ")
    assert "opsmngr-python/" in ua


# --- do ---


@pytest.mark.asyncio
async def test_do_decodes_into_model():
    async with respx.mock:
        respx.get(GROUPS_URL).mock(
            return_value=Response(
                200,
                json={
                    "results": [{"id": "1", "name": "Alpha", "orgId": "o"}],
                    "links": [{"rel": "self", "href": GROUPS_URL + "?pageNum=1"}],
                    "totalCount": 1,
                },
            )
        )
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            root, resp = await client.do(RequestContext.background(), req, into=Projects)

    assert resp.status_code == 200
    assert root.total_count == 1
    assert root.results[0].org_id == "o"
    # links are copied by services, not by do
    assert resp.links == []


@pytest.mark.asyncio
async def test_do_none_context_makes_no_call():
    async with respx.mock(assert_all_called=False):
        route = respx.get(GROUPS_URL).mock(return_value=Response(200, json={}))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(OpsManagerClientError) as exc:
                await client.do(None, req, into=Projects)

    assert "context must not be None" in str(exc.value)
    assert not route.called


@pytest.mark.asyncio
async def test_do_rejects_into_and_writer_together():
    async with make_client() as client:
        req = client.new_request("GET", "api/public/v1.0/groups")
        with pytest.raises(ValueError):
            await client.do(
                RequestContext.background(), req, into=Projects, writer=io.BytesIO()
            )


@pytest.mark.asyncio
async def test_cancelled_context_skips_transport():
    ctx = RequestContext.background()
    ctx.cancel()
    async with respx.mock(assert_all_called=False):
        route = respx.get(GROUPS_URL).mock(return_value=Response(200, json={}))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(ContextCanceledError):
                await client.do(ctx, req, into=Projects)

    assert not route.called


@pytest.mark.asyncio
async def test_expired_deadline_raises_deadline_exceeded():
    ctx = RequestContext.with_timeout(0)
    async with respx.mock(assert_all_called=False):
        route = respx.get(GROUPS_URL).mock(return_value=Response(200, json={}))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(DeadlineExceededError):
                await client.do(ctx, req, into=Projects)

    assert not route.called


@pytest.mark.asyncio
async def test_context_error_wins_over_transport_error():
    ctx = RequestContext.background()

    def cancel_then_fail(request):
        ctx.cancel()
        raise httpx.ConnectError("boom", request=request)

    async with respx.mock:
        respx.get(GROUPS_URL).mock(side_effect=cancel_then_fail)
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(ContextCanceledError) as exc:
                await client.do(ctx, req, into=Projects)

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    async with respx.mock:
        respx.get(GROUPS_URL).mock(side_effect=httpx.ConnectTimeout("boom"))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(OpsManagerTransportError):
                await client.do(RequestContext.background(), req, into=Projects)


@pytest.mark.asyncio
async def test_error_envelope_is_parsed():
    body = {
        "error": 404,
        "errorCode": "GROUP_NOT_FOUND",
        "reason": "Not Found",
        "detail": "No group with ID 42 exists.",
        "parameters": ["42"],
    }
    async with respx.mock:
        respx.get(GROUPS_URL + "/42").mock(return_value=Response(404, json=body))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups/42")
            with pytest.raises(OpsManagerHTTPError) as exc:
                await client.do(RequestContext.background(), req, into=Project)

    err = exc.value
    assert err.status_code == 404
    assert err.error_code == "GROUP_NOT_FOUND"
    assert err.reason == "Not Found"
    assert err.parameters == ["42"]
    assert err.response is not None
    assert err.response.status_code == 404
    assert "No group with ID 42 exists." in str(err)


@pytest.mark.asyncio
async def test_non_json_error_body_falls_back_to_text():
    async with respx.mock:
        respx.get(GROUPS_URL).mock(return_value=Response(502, text="<html>bad gateway</html>"))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(OpsManagerHTTPError) as exc:
                await client.do(RequestContext.background(), req, into=Projects)

    assert exc.value.status_code == 502
    assert exc.value.response_json is None
    assert "bad gateway" in exc.value.response_text


@pytest.mark.asyncio
async def test_empty_body_decodes_to_zero_value():
    async with respx.mock:
        respx.get(GROUPS_URL + "/1").mock(return_value=Response(200))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups/1")
            project, resp = await client.do(RequestContext.background(), req, into=Project)

    assert resp.status_code == 200
    assert isinstance(project, Project)
    assert project.id is None
    assert project.name is None


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error():
    async with respx.mock:
        respx.get(GROUPS_URL).mock(return_value=Response(200, text="<html>Not JSON</html>"))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(OpsManagerParseError) as exc:
                await client.do(RequestContext.background(), req, into=Projects)

    assert "Expected JSON" in str(exc.value)


@pytest.mark.asyncio
async def test_schema_mismatch_raises_model_validation_error():
    async with respx.mock:
        respx.get(GROUPS_URL).mock(
            return_value=Response(200, json={"results": "not-a-list"})
        )
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(OpsManagerModelValidationError):
                await client.do(RequestContext.background(), req, into=Projects)


@pytest.mark.asyncio
async def test_writer_receives_body_verbatim():
    payload = b"\x1f\x8b\x08\x00fake-gzip-bytes"
    sink = io.BytesIO()
    async with respx.mock:
        respx.get("https://om.example.com/api/public/v1.0/admin/diagnostics").mock(
            return_value=Response(200, content=payload)
        )
        async with make_client() as client:
            req = client.new_gzip_request("GET", "api/public/v1.0/admin/diagnostics")
            value, resp = await client.do(RequestContext.background(), req, writer=sink)

    assert value is None
    assert resp.status_code == 200
    assert sink.getvalue() == payload


@pytest.mark.asyncio
async def test_raw_capture_keeps_body_decodable():
    body = {"id": "1", "name": "Alpha"}
    async with respx.mock:
        respx.get(GROUPS_URL + "/1").mock(return_value=Response(200, json=body))
        async with make_client(with_raw=True) as client:
            req = client.new_request("GET", "api/public/v1.0/groups/1")
            project, resp = await client.do(RequestContext.background(), req, into=Project)

    assert project.name == "Alpha"
    assert json.loads(resp.raw) == body


@pytest.mark.asyncio
async def test_callbacks_run_in_order_on_success_and_error():
    events = []

    def on_completed(request, response):
        events.append(("completed", request.method, response.status_code))

    def on_processed(response):
        events.append(("processed", response.status_code))

    async with respx.mock:
        respx.get(GROUPS_URL + "/1").mock(return_value=Response(200, json={}))
        respx.get(GROUPS_URL + "/2").mock(return_value=Response(500, json={}))
        client = make_client(
            on_request_completed=on_completed, on_response_processed=on_processed
        )
        async with client:
            ctx = RequestContext.background()
            await client.do(ctx, client.new_request("GET", "api/public/v1.0/groups/1"))
            with pytest.raises(OpsManagerHTTPError):
                await client.do(
                    ctx, client.new_request("GET", "api/public/v1.0/groups/2")
                )

    assert events == [
        ("completed", "GET", 200),
        ("processed", 200),
        ("completed", "GET", 500),
        ("processed", 500),
    ]


@pytest.mark.asyncio
async def test_completed_request_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="opsmngr.client")
    async with respx.mock:
        respx.get(GROUPS_URL + "/1").mock(return_value=Response(200, json={}))
        async with make_client() as client:
            ctx = RequestContext.background(request_id="req-1")
            await client.do(
                ctx, client.new_request("GET", "api/public/v1.0/groups/1"), into=Project
            )

    record = next(r for r in caplog.records if r.getMessage() == "op.request")
    assert record.request_id == "req-1"
    assert record.method == "GET"
    assert record.status == 200
    assert record.url == GROUPS_URL + "/1"
    assert isinstance(record.duration_ms, int)


@pytest.mark.asyncio
async def test_injected_transport_is_not_closed():
    http = httpx.AsyncClient()
    client = OpsManagerClient(http=http)
    await client.aclose()
    assert not http.is_closed
    await http.aclose()


class SlowStream(httpx.AsyncByteStream):
    """Sends one chunk, then stalls before the rest of the body."""

    async def __aiter__(self):
        yield b"a"
        await asyncio.sleep(1.5)
        yield b"b"


DIAGNOSTICS_URL = "https://om.example.com/api/public/v1.0/admin/diagnostics"


@pytest.mark.asyncio
async def test_deadline_covers_body_download():
    sink = io.BytesIO()
    ctx = RequestContext.with_timeout(0.2)
    async with respx.mock:
        respx.get(DIAGNOSTICS_URL).mock(return_value=Response(200, stream=SlowStream()))
        async with make_client() as client:
            req = client.new_gzip_request("GET", "api/public/v1.0/admin/diagnostics")
            started = time.monotonic()
            with pytest.raises(DeadlineExceededError):
                await client.do(ctx, req, writer=sink)
            elapsed = time.monotonic() - started

    assert elapsed < 1.0
    assert sink.getvalue() == b"a"


@pytest.mark.asyncio
async def test_cancel_stops_body_decode():
    ctx = RequestContext.background()
    async with respx.mock:
        respx.get(GROUPS_URL).mock(return_value=Response(200, stream=SlowStream()))
        async with make_client() as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            asyncio.get_running_loop().call_later(0.1, ctx.cancel)
            started = time.monotonic()
            with pytest.raises(ContextCanceledError):
                await client.do(ctx, req, into=Projects)

    assert time.monotonic() - started < 1.0


@pytest.mark.asyncio
async def test_failing_completion_callback_still_closes_response():
    seen = []

    def on_completed(request, response):
        seen.append(response)
        raise RuntimeError("callback failed")

    async with respx.mock:
        respx.get(GROUPS_URL).mock(return_value=Response(200, json={}))
        async with make_client(on_request_completed=on_completed) as client:
            req = client.new_request("GET", "api/public/v1.0/groups")
            with pytest.raises(RuntimeError):
                await client.do(RequestContext.background(), req, into=Projects)

    assert seen[0].is_closed
