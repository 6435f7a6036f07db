import pytest

from productos_api.api.v1.error_handlers import GENERIC_SERVER_ERROR, classify_fault, fault_message
from productos_api.exceptions import (
    ConflictError,
    DuplicateError,
    InvalidFieldError,
    NotFoundError,
    RepositoryError,
    UnauthorizedError,
    ValidationError,
)


async def explode():
    raise RuntimeError("database password=hunter2 rejected")


async def lost_connection():
    raise RepositoryError("Failed to retrieve Product")


@pytest.fixture
def boom_app(app):
    app.add_api_route("/boom", explode)
    app.add_api_route("/store", lost_connection)
    return app


@pytest.fixture
def boom_production_app(production_app):
    production_app.add_api_route("/boom", explode)
    return production_app


@pytest.mark.parametrize(
    "exc, status",
    [
        (ValidationError("bad"), 400),
        (InvalidFieldError("bad field"), 400),
        (UnauthorizedError(), 401),
        (NotFoundError(), 404),
        (ConflictError("stale"), 409),
        (DuplicateError("dup"), 409),
        (RepositoryError("store down"), 500),
        (KeyError("x"), 500),
    ],
)
def test_classify_fault(exc, status):
    assert classify_fault(exc) == status


def test_fault_message_masks_server_errors_outside_development():
    exc = RuntimeError("secret detail")

    assert fault_message(exc, 500, expose_details=False) == GENERIC_SERVER_ERROR
    assert fault_message(exc, 500, expose_details=True) == "secret detail"
    assert fault_message(UnauthorizedError("Token has expired"), 401, expose_details=False) == "Token has expired"


class TestUnhandledFaults:

    async def test_development_body_exposes_message_and_trace(self, boom_app, client):
        """
        Behavior:
            - Outside production, an unexpected fault returns 500 with the raw
              message and the formatted traceback.
        """
        response = await client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["statusCode"] == 500
        assert body["exceptionType"] == "Server Error"
        assert body["message"] == "database password=hunter2 rejected"
        assert "RuntimeError" in body["stackTrace"]
        assert "explode" in body["stackTrace"]

    async def test_production_body_is_masked(self, boom_production_app, production_client):
        """
        Behavior:
            - In production the message is generic and there is no stack trace.

        Importance:
            - Internal details (here a credential) must not leak to clients.
        """
        response = await production_client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == GENERIC_SERVER_ERROR
        assert body["stackTrace"] is None
        assert "hunter2" not in response.text

    async def test_app_fault_keeps_its_status(self, boom_app, client):
        response = await client.get("/store")

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to retrieve Product"

    async def test_fault_is_logged_with_traceback(self, boom_app, client, caplog):
        await client.get("/boom")

        records = [r for r in caplog.records if r.message == "fault.unhandled"]
        assert len(records) == 1
        assert records[0].exc_info is not None
        assert records[0].status_code == 500


class TestFrameworkFaults:

    async def test_unknown_route_is_404_error_body(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["exceptionType"] == "Not Found"
        assert set(body) == {"statusCode", "message", "exceptionType", "stackTrace", "timestamp"}

    async def test_wrong_method_is_405(self, client):
        response = await client.patch("/api/producto/1")

        assert response.status_code == 405
        assert response.json()["exceptionType"] == "Method Not Allowed"

    async def test_bad_query_parameter_is_400(self, client):
        response = await client.get("/api/producto", params={"offset": "first"})

        assert response.status_code == 400
        assert response.json()["message"].startswith("query.offset")

    async def test_malformed_json_is_400(self, client, auth_headers):
        response = await client.post(
            "/api/producto",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400


class TestRequestId:

    async def test_generated_when_missing(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 36

    async def test_incoming_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "trace-abc.123"})

        assert response.headers["X-Request-ID"] == "trace-abc.123"

    async def test_error_responses_carry_the_id(self, boom_app, client):
        response = await client.get("/boom", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-42"

    async def test_unsafe_id_is_replaced(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "bad id; injected=1"})

        assert response.headers["X-Request-ID"] != "bad id; injected=1"
