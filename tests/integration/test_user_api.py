"""Integration tests for the User Registry HTTP API."""

import json
import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from user_registry.adapters.inbound.rest_api import create_app, send_json
from user_registry.application.user_service import UserService
from user_registry.ports.outbound import StorageError


def create_user(client: TestClient, payload: dict) -> dict:
    """Create a user through the API and return its record."""
    response = client.post("/user", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.integration
class TestCreateUser:
    """POST /user."""

    def test_create_minimal(self, client: TestClient):
        payload = {"first_name": "Al", "last_name": "Bo", "biography": "x" * 20}
        response = client.post("/user", json=payload)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"data"}
        assert uuid.UUID(body["data"]["id"])
        assert body["data"]["first_name"] == "Al"
        assert body["data"]["last_name"] == "Bo"
        assert body["data"]["biography"] == "x" * 20

    def test_ids_unique(self, client: TestClient, valid_payload: dict):
        ids = {create_user(client, valid_payload)["id"] for _ in range(25)}
        assert len(ids) == 25

    def test_body_id_ignored(self, client: TestClient, valid_payload: dict):
        forced = str(uuid.uuid4())
        user = create_user(client, {**valid_payload, "id": forced})
        assert user["id"] != forced

    @pytest.mark.parametrize("length", [20, 450])
    def test_biography_edges_accepted(self, client: TestClient, valid_payload: dict, length):
        response = client.post("/user", json={**valid_payload, "biography": "b" * length})
        assert response.status_code == 201

    @pytest.mark.parametrize("length", [19, 451])
    def test_biography_outside_rejected(self, client: TestClient, valid_payload: dict, length):
        response = client.post("/user", json={**valid_payload, "biography": "b" * length})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Biography must have between 20 and 450 characters."
        }

    @pytest.mark.parametrize("field", ["first_name", "last_name"])
    @pytest.mark.parametrize("length", [2, 20])
    def test_name_edges_accepted(self, client: TestClient, valid_payload: dict, field, length):
        response = client.post("/user", json={**valid_payload, field: "n" * length})
        assert response.status_code == 201

    @pytest.mark.parametrize(
        "field, label", [("first_name", "First name"), ("last_name", "Last name")]
    )
    @pytest.mark.parametrize("length", [1, 21])
    def test_name_outside_rejected(
        self, client: TestClient, valid_payload: dict, field, label, length
    ):
        response = client.post("/user", json={**valid_payload, field: "n" * length})
        assert response.status_code == 400
        assert response.json() == {"error": f"{label} must have between 2 and 20 characters."}

    def test_missing_fields_fail_validation(self, client: TestClient):
        response = client.post("/user", json={})
        assert response.status_code == 400
        assert "Biography" in response.json()["error"]

    @pytest.mark.parametrize(
        "content",
        [b"", b"{not json", b"[1, 2]", b'{"first_name": 42}', b'{"biography": ["x"]}', b"nul"],
    )
    def test_malformed_body(self, client: TestClient, content: bytes):
        response = client.post(
            "/user", content=content, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 422
        assert response.json() == {"error": "Invalid body."}

    def test_null_body_fails_validation(self, client: TestClient):
        response = client.post(
            "/user", content=b"null", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Biography")

    @pytest.mark.parametrize(
        "field, label",
        [("first_name", "First name"), ("last_name", "Last name"), ("biography", "Biography")],
    )
    def test_null_field_fails_validation(
        self, client: TestClient, valid_payload: dict, field, label
    ):
        response = client.post("/user", json={**valid_payload, field: None})
        assert response.status_code == 400
        assert response.json()["error"].startswith(label)

    def test_body_too_large(self, client: TestClient, valid_payload: dict):
        content = json.dumps({**valid_payload, "padding": "p" * 10_000}).encode()
        response = client.post(
            "/user", content=content, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 413
        assert response.json() == {"error": "Body too large."}

    def test_body_at_limit_accepted(self, client: TestClient, valid_payload: dict):
        content = json.dumps(valid_payload).encode()
        content += b" " * (10_000 - len(content))
        assert len(content) == 10_000
        response = client.post(
            "/user", content=content, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 201

    def test_size_checked_before_parsing(self, client: TestClient):
        response = client.post("/user", content=b"{" * 10_001)
        assert response.status_code == 413

    def test_chunked_body_too_large(self, client: TestClient):
        """Test the cap on bodies sent without a Content-Length."""

        def chunks():
            yield b'{"padding": "'
            for _ in range(11):
                yield b"p" * 1_000
            yield b'"}'

        response = client.post(
            "/user", content=chunks(), headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 413
        assert response.json() == {"error": "Body too large."}

    def test_chunked_body_within_limit(self, client: TestClient, valid_payload: dict):
        encoded = json.dumps(valid_payload).encode()

        def chunks():
            yield encoded[:10]
            yield encoded[10:]

        response = client.post(
            "/user", content=chunks(), headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 201
        assert response.json()["data"]["first_name"] == valid_payload["first_name"]

    def test_unicode_counted_in_characters(self, client: TestClient, valid_payload: dict):
        user = create_user(client, {**valid_payload, "biography": "ü" * 20})
        assert user["biography"] == "ü" * 20


@pytest.mark.integration
class TestGetUser:
    """GET /user/{id}."""

    def test_round_trip(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        response = client.get(f"/user/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"data": created}

    def test_repeated_get_is_stable(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        first = client.get(f"/user/{created['id']}").json()
        second = client.get(f"/user/{created['id']}").json()
        assert first == second

    def test_unknown_id(self, client: TestClient):
        response = client.get(f"/user/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}

    def test_invalid_id(self, client: TestClient):
        response = client.get("/user/not-a-uuid")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid UUID."}

    @pytest.mark.parametrize(
        "raw",
        [
            "+00000000000-0000-0000-000000000000",
            "00000000000000000000000000000_01",
            "-".join("0" * 32),
            "uuid:00000000-0000-0000-0000-000000000000",
        ],
    )
    def test_lenient_uuid_forms_rejected(self, client: TestClient, raw):
        response = client.get(f"/user/{raw}")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid UUID."}

    def test_braced_id_accepted(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        response = client.get(f"/user/{{{created['id']}}}")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]


@pytest.mark.integration
class TestListUsers:
    """GET /users."""

    def test_empty_list_is_not_null(self, client: TestClient):
        response = client.get("/users")
        assert response.status_code == 200
        assert response.json() == {"data": []}

    def test_lists_every_user(self, client: TestClient, valid_payload: dict):
        created = [create_user(client, valid_payload) for _ in range(3)]
        response = client.get("/users")

        assert response.status_code == 200
        listed = response.json()["data"]
        assert sorted(u["id"] for u in listed) == sorted(u["id"] for u in created)


@pytest.mark.integration
class TestReplaceUser:
    """PUT /user/{id}."""

    def test_replace(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        replacement = {
            "first_name": "Grace",
            "last_name": "Hopper",
            "biography": "Pioneer of compilers and COBOL.",
            "id": str(uuid.uuid4()),
        }
        response = client.put(f"/user/{created['id']}", json=replacement)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == created["id"]
        assert data["first_name"] == "Grace"
        assert client.get(f"/user/{created['id']}").json()["data"] == data

    def test_replace_unknown_id_leaves_storage_unchanged(
        self, client: TestClient, valid_payload: dict
    ):
        created = create_user(client, valid_payload)
        response = client.put(f"/user/{uuid.uuid4()}", json=valid_payload)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}
        assert client.get("/users").json() == {"data": [created]}

    def test_replace_invalid_id(self, client: TestClient, valid_payload: dict):
        response = client.put("/user/123", json=valid_payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid UUID."}

    def test_body_checked_before_id(self, client: TestClient):
        response = client.put("/user/123", json={"biography": "too short"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Biography")

    def test_replace_malformed_body(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        response = client.put(f"/user/{created['id']}", content=b"{")
        assert response.status_code == 422

    def test_replace_body_too_large(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)
        response = client.put(f"/user/{created['id']}", content=b" " * 10_001)
        assert response.status_code == 413


@pytest.mark.integration
class TestDeleteUser:
    """DELETE /user/{id}."""

    def test_delete_then_get(self, client: TestClient, valid_payload: dict):
        created = create_user(client, valid_payload)

        response = client.delete(f"/user/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""

        response = client.get(f"/user/{created['id']}")
        assert response.status_code == 404

    def test_delete_unknown(self, client: TestClient):
        response = client.delete(f"/user/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}

    def test_delete_invalid_id(self, client: TestClient):
        response = client.delete("/user/zzz")
        assert response.status_code == 400


@pytest.mark.integration
class TestErrorHandling:
    """Failure translation at the HTTP boundary."""

    @pytest.fixture
    def failing_client(self) -> TestClient:
        repository = MagicMock()
        repository.backend_name = "postgres"
        repository.ping.return_value = False
        repository.create.side_effect = StorageError('relation "users" does not exist')
        repository.list_all.side_effect = StorageError("connection refused")
        repository.get_by_id.side_effect = RuntimeError("unexpected")
        app = create_app(UserService(repository), max_body_bytes=10_000)
        return TestClient(app, raise_server_exceptions=False)

    def test_storage_failure_on_create(self, failing_client: TestClient, valid_payload: dict):
        response = failing_client.post("/user", json=valid_payload)
        assert response.status_code == 500
        assert response.json() == {"error": "User creation failed."}
        assert "relation" not in response.text

    def test_storage_failure_on_list(self, failing_client: TestClient):
        response = failing_client.get("/users")
        assert response.status_code == 500
        assert response.json() == {"error": "Could not list users."}

    def test_unexpected_error(self, failing_client: TestClient):
        response = failing_client.get(f"/user/{uuid.uuid4()}")
        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong."}

    def test_unhealthy(self, failing_client: TestClient):
        response = failing_client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_unknown_route(self, client: TestClient):
        response = client.get("/nope")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_method_not_allowed(self, client: TestClient):
        response = client.patch(f"/user/{uuid.uuid4()}", json={})
        assert response.status_code == 405
        assert "error" in response.json()

    def test_encoding_failure_falls_back(self):
        class Unencodable(BaseModel):
            value: object

        response = send_json(Unencodable(value=object()), 200)
        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "Something went wrong."}


@pytest.mark.integration
class TestSystemEndpoints:
    """Health and request tracing."""

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["storage"] == "memory"

    def test_request_id_generated(self, client: TestClient):
        response = client.get("/users")
        assert response.headers["X-Request-ID"]

    def test_request_id_propagated(self, client: TestClient):
        response = client.get("/users", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
