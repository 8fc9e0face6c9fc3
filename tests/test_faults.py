"""
Faults and the fault engine: filter selection and default error mapping.
"""

import pytest

from nestlet import (
    BadRequest,
    FaultDomain,
    FaultEngine,
    FaultFilter,
    Forbidden,
    HTTPFault,
    InternalServerError,
    NotFound,
    Severity,
    catch,
)
from nestlet.faults import INTERNAL_ERROR_BODY

from conftest import make_context, response_json


# ============================================================================
# HTTP faults
# ============================================================================

class TestHTTPFault:

    @pytest.mark.parametrize("fault_cls,status,domain", [
        (BadRequest, 400, FaultDomain.VALIDATION),
        (Forbidden, 403, FaultDomain.SECURITY),
        (NotFound, 404, FaultDomain.ROUTING),
        (InternalServerError, 500, FaultDomain.SYSTEM),
    ])
    def test_builtin_statuses(self, fault_cls, status, domain):
        fault = fault_cls()
        assert fault.get_status() == status
        assert fault.domain == domain
        assert fault.to_body() == {"statusCode": status, "message": fault_cls.default_message}

    def test_custom_status(self):
        fault = HTTPFault("I'm a teapot", 418)
        assert fault.get_status() == 418
        assert fault.to_body() == {"statusCode": 418, "message": "I'm a teapot"}
        assert fault.public is True

    def test_dict_response(self):
        fault = BadRequest({"message": "Invalid data", "errors": ["name"]})
        assert fault.message == "Invalid data"
        assert fault.to_body() == {"statusCode": 400, "message": "Invalid data", "errors": ["name"]}

    def test_server_faults_are_not_public(self):
        assert InternalServerError().public is False

    def test_to_dict(self):
        fault = NotFound("Cat #9 not found", metadata={"id": 9})
        data = fault.to_dict()
        assert data["code"] == "NOT_FOUND"
        assert data["message"] == "Cat #9 not found"
        assert data["metadata"] == {"id": 9}

    def test_severity_override(self):
        assert BadRequest("x", severity=Severity.ERROR).severity == Severity.ERROR


# ============================================================================
# Filters
# ============================================================================

@catch(BadRequest)
class BadRequestFilter(FaultFilter):
    def catch(self, error, host):
        host.switch_to_http().get_response().json({"handled_by": "bad_request"}, status=422)


@catch()
class CatchAllFilter(FaultFilter):
    async def catch(self, error, host):
        host.switch_to_http().get_response().json({"handled_by": "all"}, status=599)


@catch(HTTPFault)
class PlainFilter:
    """A filter that does not subclass FaultFilter."""

    def catch(self, error, host):
        host.get_response().json({"handled_by": "plain"}, status=error.get_status())


class TestFilterSelection:

    def test_typed_filter_matches_subclasses(self):
        engine = FaultEngine([BadRequestFilter()])
        assert isinstance(engine.find_filter(BadRequest()), BadRequestFilter)
        assert engine.find_filter(NotFound()) is None

    def test_filters_tried_in_order(self):
        engine = FaultEngine([BadRequestFilter(), CatchAllFilter()])
        assert isinstance(engine.find_filter(BadRequest()), BadRequestFilter)
        assert isinstance(engine.find_filter(RuntimeError()), CatchAllFilter)

    def test_catch_all_first_shadows_rest(self):
        engine = FaultEngine([CatchAllFilter(), BadRequestFilter()])
        assert isinstance(engine.find_filter(BadRequest()), CatchAllFilter)

    def test_duck_typed_filter(self):
        engine = FaultEngine([PlainFilter()])
        assert isinstance(engine.find_filter(NotFound()), PlainFilter)
        assert engine.find_filter(KeyError()) is None

    def test_register_appends(self):
        engine = FaultEngine()
        engine.register(CatchAllFilter())
        assert len(engine.filters) == 1


class TestFaultEngine:

    @pytest.mark.asyncio
    async def test_matching_filter_writes_response(self):
        context = make_context()
        await FaultEngine([BadRequestFilter()]).handle(BadRequest("nope"), context)
        response = context.get_response()
        assert response.status_code == 422
        assert response_json(response) == {"handled_by": "bad_request"}

    @pytest.mark.asyncio
    async def test_async_filter(self):
        context = make_context()
        await FaultEngine([CatchAllFilter()]).handle(ValueError("x"), context)
        assert context.get_response().status_code == 599

    @pytest.mark.asyncio
    async def test_default_http_fault_mapping(self):
        context = make_context()
        await FaultEngine().handle(NotFound("Cat #9 not found"), context)
        response = context.get_response()
        assert response.status_code == 404
        assert response_json(response) == {"statusCode": 404, "message": "Cat #9 not found"}

    @pytest.mark.asyncio
    async def test_unmatched_filter_falls_back_to_default(self):
        context = make_context()
        await FaultEngine([BadRequestFilter()]).handle(Forbidden("Forbidden resource"), context)
        response = context.get_response()
        assert response.status_code == 403
        assert response_json(response) == {"statusCode": 403, "message": "Forbidden resource"}

    @pytest.mark.asyncio
    async def test_unknown_error_is_500_without_detail(self, caplog):
        context = make_context()
        with caplog.at_level("ERROR", logger="nestlet.faults"):
            await FaultEngine().handle(RuntimeError("db password is hunter2"), context)

        response = context.get_response()
        assert response.status_code == 500
        assert response_json(response) == INTERNAL_ERROR_BODY
        assert b"hunter2" not in response.body
        assert "RuntimeError" in caplog.text
        assert caplog.records[-1].exc_info is not None

    @pytest.mark.asyncio
    async def test_failing_filter_becomes_500(self, caplog):
        @catch()
        class BrokenFilter(FaultFilter):
            def catch(self, error, host):
                raise KeyError("filter bug")

        context = make_context()
        with caplog.at_level("ERROR", logger="nestlet.faults"):
            await FaultEngine([BrokenFilter()]).handle(BadRequest("x"), context)

        response = context.get_response()
        assert response.status_code == 500
        assert response_json(response) == {"statusCode": 500, "message": "Internal Server Error"}
        assert "BrokenFilter raised" in caplog.text

    @pytest.mark.asyncio
    async def test_dict_fault_body(self):
        context = make_context()
        await FaultEngine().handle(BadRequest({"message": "Invalid", "errors": ["age"]}), context)
        assert response_json(context.get_response()) == {
            "statusCode": 400, "message": "Invalid", "errors": ["age"],
        }

    @pytest.mark.asyncio
    async def test_ended_response_is_left_alone(self):
        context = make_context()
        context.get_response().json({"already": "sent"})
        await FaultEngine().handle(RuntimeError("late"), context)
        assert response_json(context.get_response()) == {"already": "sent"}
