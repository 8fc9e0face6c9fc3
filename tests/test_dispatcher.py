"""
Dispatching and the per-route pipeline, end to end over real Request/Response objects.
"""

import pytest
import pytest_asyncio

from nestlet import (
    Body,
    Controller,
    GET,
    Guard,
    Header,
    NestletFactory,
    POST,
    Param,
    Pipe,
    Provider,
    Query,
    Req,
    Request,
    Res,
    Response,
    injectable,
    module,
)

from conftest import make_request, response_json


@injectable("COUNTER")
class HeaderGuard(Guard):
    def __init__(self, counter):
        self.counter = counter

    def can_activate(self, context):
        self.counter.hit("guard")
        return context.get_request().headers.get("x-allow") == "yes"


@injectable("COUNTER")
class RecordingPipe(Pipe):
    def __init__(self, counter):
        self.counter = counter

    def transform(self, value, metadata):
        self.counter.hit(f"pipe:{metadata.type}")
        return value


@injectable("COUNTER")
class EchoController(Controller):
    prefix = "echo"

    def __init__(self, counter):
        self.counter = counter

    @POST("guarded", params=[Body()], guards=[HeaderGuard], pipes=[RecordingPipe])
    def guarded(self, body):
        self.counter.hit("handler")
        return body

    @POST("body", params=[Body()])
    def body(self, body):
        return {"received": body}

    @POST("field", params=[Body("name"), Body("missing")])
    def field(self, name, missing):
        return {"name": name, "missing": missing}

    @GET("query", params=[Query("q"), Query()])
    def query(self, q, everything):
        return {"q": q, "all": everything}

    @GET("headers", params=[Header("X-Token"), Header()])
    def headers(self, token, everything):
        return {"token": token, "agent": everything.get("user-agent")}

    @GET("items/:id/:slug", params=[Param("id"), Param()])
    def params(self, item_id, everything):
        return {"id": item_id, "all": everything}

    @POST("kinds", params=[Req(), Res(), Body(), Query("q"), Param(), Header("x-a")], pipes=[RecordingPipe])
    def kinds(self, request, response, body, q, params, header):
        return {
            "request": isinstance(request, Request),
            "response": isinstance(response, Response),
        }

    @POST("created", params=[Res()])
    async def created(self, response):
        response.status_code = 201
        return {"id": 3}

    @GET("raw", params=[Res()])
    def raw(self, response):
        response.text("written by handler", status=202)
        return {"ignored": True}

    @GET("partial", params=[Res()])
    def partial(self, response):
        response.write("streamed")
        return {"ignored": True}

    @GET("none")
    def nothing(self):
        return None

    @GET("boom")
    def boom(self):
        raise RuntimeError("secret detail")


@pytest_asyncio.fixture
async def app(counter):
    @module(
        providers=[Provider("COUNTER", use_value=counter), HeaderGuard, RecordingPipe],
        controllers=[EchoController],
    )
    class EchoModule:
        pass

    application = await NestletFactory.create(EchoModule)
    yield application
    await application.close()


async def dispatch(app, method, path, **kw):
    request = make_request(method, path, **kw)
    response = Response()
    await app.dispatch(method, path, request, response)
    return request, response


# ============================================================================
# Routing
# ============================================================================

class TestDispatch:

    @pytest.mark.asyncio
    async def test_unmatched_is_404_without_pipeline(self, app, counter):
        _, response = await dispatch(app, "GET", "/nowhere")
        assert response.status_code == 404
        assert response_json(response) == {"statusCode": 404, "message": "Cannot GET /nowhere"}
        assert counter.calls == {}

    @pytest.mark.asyncio
    async def test_wrong_method_is_404(self, app):
        _, response = await dispatch(app, "DELETE", "/echo/body")
        assert response.status_code == 404
        assert response_json(response)["message"] == "Cannot DELETE /echo/body"

    @pytest.mark.asyncio
    async def test_request_params_are_set(self, app):
        request, response = await dispatch(app, "GET", "/echo/items/5/fat-cat")
        assert request.params == {"id": "5", "slug": "fat-cat"}
        assert response_json(response) == {"id": "5", "all": {"id": "5", "slug": "fat-cat"}}


# ============================================================================
# Guards
# ============================================================================

class TestGuardStage:

    @pytest.mark.asyncio
    async def test_rejection_happens_before_body_and_pipes(self, app, counter):
        request, response = await dispatch(app, "POST", "/echo/guarded", body={"name": "Tom"})
        assert response.status_code == 403
        assert response_json(response) == {"statusCode": 403, "message": "Forbidden resource"}
        assert counter["guard"] == 1
        assert counter["pipe:body"] == 0
        assert counter["handler"] == 0
        assert request._body is None

    @pytest.mark.asyncio
    async def test_allowed_request_runs_every_stage(self, app, counter):
        _, response = await dispatch(
            app, "POST", "/echo/guarded", body={"name": "Tom"}, headers={"X-Allow": "yes"},
        )
        assert response.status_code == 200
        assert response_json(response) == {"name": "Tom"}
        assert counter.events == ["guard", "pipe:body", "handler"]


# ============================================================================
# Body & arguments
# ============================================================================

class TestArguments:

    @pytest.mark.asyncio
    async def test_json_body(self, app):
        _, response = await dispatch(app, "POST", "/echo/body", body={"a": 1})
        assert response_json(response) == {"received": {"a": 1}}

    @pytest.mark.asyncio
    async def test_non_json_body_is_text(self, app):
        _, response = await dispatch(app, "POST", "/echo/body", body="plain words")
        assert response_json(response) == {"received": "plain words"}

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_dict(self, app):
        _, response = await dispatch(app, "POST", "/echo/body")
        assert response_json(response) == {"received": {}}

    @pytest.mark.asyncio
    async def test_body_keys(self, app):
        _, response = await dispatch(app, "POST", "/echo/field", body={"name": "Tom"})
        assert response_json(response) == {"name": "Tom", "missing": None}

    @pytest.mark.asyncio
    async def test_body_key_of_non_object_is_none(self, app):
        _, response = await dispatch(app, "POST", "/echo/field", body=[1, 2])
        assert response_json(response) == {"name": None, "missing": None}

    @pytest.mark.asyncio
    async def test_query(self, app):
        _, response = await dispatch(app, "GET", "/echo/query", query_string="q=cats&page=2&q=dogs")
        assert response_json(response) == {"q": "cats", "all": {"q": "cats", "page": "2"}}

    @pytest.mark.asyncio
    async def test_headers(self, app):
        _, response = await dispatch(
            app, "GET", "/echo/headers", headers={"X-Token": "abc", "User-Agent": "pytest"},
        )
        assert response_json(response) == {"token": "abc", "agent": "pytest"}

    @pytest.mark.asyncio
    async def test_pipes_skip_request_and_response(self, app, counter):
        _, response = await dispatch(app, "POST", "/echo/kinds", body={"x": 1}, query_string="q=1")
        assert response_json(response) == {"request": True, "response": True}
        assert counter.events == ["pipe:body", "pipe:query", "pipe:param", "pipe:custom"]


# ============================================================================
# Emission
# ============================================================================

class TestEmission:

    @pytest.mark.asyncio
    async def test_handler_status_is_kept(self, app):
        _, response = await dispatch(app, "POST", "/echo/created")
        assert response.status_code == 201
        assert response_json(response) == {"id": 3}
        assert response.get_header("content-type") == "application/json"

    @pytest.mark.asyncio
    async def test_handler_written_response_is_not_replaced(self, app):
        _, response = await dispatch(app, "GET", "/echo/raw")
        assert response.status_code == 202
        assert response.body == b"written by handler"

    @pytest.mark.asyncio
    async def test_unended_response_gets_result_appended(self, app):
        _, response = await dispatch(app, "GET", "/echo/partial")
        assert response.ended
        assert response.body == b'streamed{"ignored":true}'

    @pytest.mark.asyncio
    async def test_none_result_is_json_null(self, app):
        _, response = await dispatch(app, "GET", "/echo/none")
        assert response.status_code == 200
        assert response.body == b"null"

    @pytest.mark.asyncio
    async def test_handler_error_is_500(self, app):
        _, response = await dispatch(app, "GET", "/echo/boom")
        assert response.status_code == 500
        assert response_json(response) == {"statusCode": 500, "message": "Internal Server Error"}
        assert b"secret" not in response.body
