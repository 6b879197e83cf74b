"""
Unit tests for API routes.

Tests endpoint responses with overridden dependencies: an in-memory
repository behind a fast-hashing service, and a rule set pinned to a
fixed date.
"""

from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from registrar.api.dependencies import (
    get_registration_fields,
    get_registration_service,
    get_rule_set,
)
from registrar.api.routes import router
from registrar.domain.exceptions import EmailAlreadyRegistered
from registrar.domain.registration import RegistrationService
from registrar.domain.rules import RegistrationFlow, RuleSet, field_names


@pytest.fixture
def app(service: RegistrationService, rules: RuleSet) -> Iterator[FastAPI]:
    """Create test FastAPI application with the profile flow."""
    test_app = FastAPI()
    test_app.include_router(router)
    test_app.dependency_overrides[get_registration_service] = lambda: service
    test_app.dependency_overrides[get_rule_set] = lambda: rules
    test_app.dependency_overrides[get_registration_fields] = lambda: field_names(
        RegistrationFlow.PROFILE
    )
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


def override_service(app: FastAPI, mock_service: MagicMock) -> None:
    app.dependency_overrides[get_registration_service] = lambda: mock_service


class TestRegisterEndpoint:
    """Tests for POST /register endpoint."""

    def test_register_success_returns_201(
        self, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """Successful registration returns 201 with the public record."""
        response = client.post("/register", json=profile_body)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful"
        assert body["data"]["email"] == "john.doe@gmail.com"
        assert body["data"]["firstName"] == "John"
        assert body["data"]["lastName"] == "Doe"
        assert "createdAt" in body["data"]
        assert "password" not in body["data"]
        assert "passwordHash" not in body["data"]

    def test_register_normalizes_identity_fields(
        self, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """Names are trimmed and the email lower-cased before storage."""
        response = client.post(
            "/register",
            json={**profile_body, "firstName": "  John ", "email": " John.Doe@GMAIL.com "},
        )

        assert response.status_code == 201
        assert response.json()["data"]["firstName"] == "John"
        assert response.json()["data"]["email"] == "john.doe@gmail.com"

    def test_validation_failure_returns_400_field_errors(self, client: TestClient) -> None:
        """An empty body fails with one error per profile field."""
        response = client.post("/register", json={})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "errors": [
                {"field": "firstName", "message": "First name is required"},
                {"field": "lastName", "message": "Last name is required"},
                {"field": "email", "message": "Email is required"},
                {"field": "password", "message": "Password is required"},
            ],
        }

    def test_validation_failure_never_touches_service(
        self, app: FastAPI, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """A body with any failing field never reaches the gateway."""
        mock_service = MagicMock(spec=RegistrationService)
        override_service(app, mock_service)

        response = client.post("/register", json={**profile_body, "email": "user@yahoo.com"})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "email", "message": "Only Gmail addresses are accepted"}
        ]
        mock_service.register_screened.assert_not_called()

    def test_reserved_email_returns_400(
        self, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """The reserved address is rejected at the validation layer."""
        response = client.post("/register", json={**profile_body, "email": "test@gmail.com"})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "email", "message": "This email address is already registered"}
        ]

    def test_duplicate_returns_409(self, client: TestClient, profile_body: dict[str, Any]) -> None:
        """A second registration with the same email returns 409 on the email field."""
        assert client.post("/register", json=profile_body).status_code == 201

        response = client.post(
            "/register", json={**profile_body, "email": "JOHN.DOE@gmail.com"}
        )

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "errors": [{"field": "email", "message": "This email address is already registered"}],
        }

    def test_insert_conflict_returns_409(
        self, app: FastAPI, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """A conflict raised by the gateway maps to 409."""
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.register_screened.side_effect = EmailAlreadyRegistered("john.doe@gmail.com")
        override_service(app, mock_service)

        response = client.post("/register", json=profile_body)

        assert response.status_code == 409

    def test_unexpected_error_returns_500(
        self, app: FastAPI, client: TestClient, profile_body: dict[str, Any]
    ) -> None:
        """Storage failures return the generic registration message."""
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.register_screened.side_effect = RuntimeError("connection lost")
        override_service(app, mock_service)

        response = client.post("/register", json=profile_body)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An error occurred during registration",
        }

    def test_wrong_types_are_field_errors(self, client: TestClient) -> None:
        """Non-string values are reported as missing, not as schema errors."""
        response = client.post(
            "/register",
            json={"firstName": 1, "lastName": True, "email": None, "password": ["x"]},
        )

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 4

    def test_account_flow(
        self, app: FastAPI, client: TestClient, account_values: dict[str, Any]
    ) -> None:
        """With the account flow configured, the extended fields are validated."""
        app.dependency_overrides[get_registration_fields] = lambda: field_names(
            RegistrationFlow.ACCOUNT
        )

        rejected = client.post("/register", json={**account_values, "dateOfBirth": "2010-01-01"})
        assert rejected.status_code == 400
        assert rejected.json()["errors"] == [
            {"field": "dateOfBirth", "message": "You must be at least 18 years old"}
        ]

        accepted = client.post("/register", json=account_values)
        assert accepted.status_code == 201
        assert "firstName" not in accepted.json()["data"]


class TestUsersEndpoint:
    """Tests for GET /users endpoint."""

    def test_empty_list(self, client: TestClient) -> None:
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}

    def test_lists_users_newest_first_without_credentials(
        self, client: TestClient, service: RegistrationService
    ) -> None:
        """Users come back newest first and without password material."""
        service.register("first@gmail.com", "Password1!", "First", "User")
        service.register("second@gmail.com", "Password1!", "Second", "User")

        response = client.get("/users")

        data = response.json()["data"]
        assert [u["email"] for u in data] == ["second@gmail.com", "first@gmail.com"]
        for record in data:
            assert set(record) == {"id", "firstName", "lastName", "email", "createdAt"}

    def test_storage_failure_returns_500(self, app: FastAPI, client: TestClient) -> None:
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.list_users.side_effect = RuntimeError("connection lost")
        override_service(app, mock_service)

        response = client.get("/users")

        assert response.status_code == 500
        assert response.json()["message"] == "An error occurred while fetching users"


class TestDeleteUserEndpoint:
    """Tests for DELETE /users/{email} endpoint."""

    def test_delete_existing_user(self, client: TestClient, service: RegistrationService) -> None:
        service.register("user@gmail.com", "Password1!")

        response = client.delete("/users/USER@gmail.com")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User deleted successfully"}
        assert service.find_by_email("user@gmail.com") is None

    def test_delete_missing_user_returns_404(self, client: TestClient) -> None:
        response = client.delete("/users/nobody@gmail.com")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    def test_storage_failure_returns_500(self, app: FastAPI, client: TestClient) -> None:
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.delete_user.side_effect = RuntimeError("connection lost")
        override_service(app, mock_service)

        response = client.delete("/users/user@gmail.com")

        assert response.status_code == 500
        assert response.json()["message"] == "An error occurred while deleting user"
