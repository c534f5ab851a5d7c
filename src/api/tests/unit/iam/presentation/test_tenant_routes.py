"""Unit tests for tenant HTTP routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, HTTPException, status
from fastapi.testclient import TestClient

from iam.application.services import TenantService
from iam.application.value_objects import AuthenticatedUser, UserTenant
from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId, TenantPlan, TenantRole, UserId
from iam.ports.exceptions import DuplicateTenantSlugError
from infrastructure.error_handlers import register_exception_handlers


@pytest.fixture
def mock_tenant_service() -> AsyncMock:
    """Mock TenantService for testing."""
    return AsyncMock(spec=TenantService)


@pytest.fixture
def mock_user() -> AuthenticatedUser:
    """The authenticated caller."""
    return AuthenticatedUser(user_id=UserId("test-user-123"), username="testuser")


def build_app(mock_tenant_service: AsyncMock, user_dependency) -> FastAPI:
    from iam.dependencies.tenant import get_tenant_service
    from iam.dependencies.user import get_authenticated_user
    from iam.presentation import router

    app = FastAPI()
    register_exception_handlers(app)
    app.dependency_overrides[get_tenant_service] = lambda: mock_tenant_service
    app.dependency_overrides[get_authenticated_user] = user_dependency
    app.include_router(router)
    return app


@pytest.fixture
def test_client(
    mock_tenant_service: AsyncMock, mock_user: AuthenticatedUser
) -> TestClient:
    """Create TestClient with mocked dependencies."""
    return TestClient(build_app(mock_tenant_service, lambda: mock_user))


@pytest.fixture
def unauthenticated_test_client(mock_tenant_service: AsyncMock) -> TestClient:
    """TestClient whose auth dependency rejects every request."""

    async def raise_unauthorized() -> AuthenticatedUser:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TestClient(build_app(mock_tenant_service, raise_unauthorized))


class TestListTenants:
    """Tests for GET /tenants."""

    def test_lists_user_tenants(
        self, test_client: TestClient, mock_tenant_service: AsyncMock
    ):
        """Each tenant carries the caller's role under userRole."""
        tenant_id = TenantId.generate()
        mock_tenant_service.list_user_tenants.return_value = [
            UserTenant(
                id=tenant_id,
                name="Acme",
                slug="acme",
                plan=TenantPlan.ENTERPRISE,
                user_role=TenantRole.ADMIN,
            )
        ]

        response = test_client.get("/tenants")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "id": tenant_id.value,
                "name": "Acme",
                "slug": "acme",
                "plan": "enterprise",
                "userRole": "admin",
            }
        ]
        mock_tenant_service.list_user_tenants.assert_awaited_once_with(
            UserId("test-user-123")
        )

    def test_empty_list(self, test_client: TestClient, mock_tenant_service: AsyncMock):
        """Users without tenants get an empty array."""
        mock_tenant_service.list_user_tenants.return_value = []

        assert test_client.get("/tenants").json() == []

    def test_unauthenticated_is_401_message(
        self, unauthenticated_test_client: TestClient
    ):
        """Auth failures use the message error shape."""
        response = unauthenticated_test_client.get("/tenants")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Missing or invalid Authorization header"}
        assert response.headers["www-authenticate"] == "Bearer"


class TestCreateTenant:
    """Tests for POST /tenants."""

    def test_creates_tenant_owned_by_caller(
        self, test_client: TestClient, mock_tenant_service: AsyncMock
    ):
        """The response describes the new tenant with the owner role."""
        tenant = Tenant.create(name="Acme", slug="acme", owner_id=UserId("test-user-123"))
        mock_tenant_service.create_tenant.return_value = tenant

        response = test_client.post("/tenants", json={"name": "Acme", "slug": "acme"})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == tenant.id.value
        assert response.json()["userRole"] == "owner"
        mock_tenant_service.create_tenant.assert_awaited_once_with(
            name="Acme", slug="acme", creator_id=UserId("test-user-123")
        )

    def test_duplicate_slug_is_409(
        self, test_client: TestClient, mock_tenant_service: AsyncMock
    ):
        """A taken slug gives 409."""
        mock_tenant_service.create_tenant.side_effect = DuplicateTenantSlugError("x")

        response = test_client.post("/tenants", json={"name": "Acme", "slug": "acme"})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"message": "Tenant with this slug already exists"}

    def test_invalid_slug_is_validation_error(
        self, test_client: TestClient, mock_tenant_service: AsyncMock
    ):
        """A malformed slug is rejected before the service is called."""
        response = test_client.post("/tenants", json={"name": "Acme", "slug": "Not OK"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["success"] is False
        assert body["error"]["name"] == "ValidationError"
        assert body["error"]["issues"][0]["path"] == ["slug"]
        mock_tenant_service.create_tenant.assert_not_awaited()

    def test_domain_rejection_is_422(
        self, test_client: TestClient, mock_tenant_service: AsyncMock
    ):
        """Errors raised by the domain become 422 messages."""
        mock_tenant_service.create_tenant.side_effect = ValueError(
            "Tenant name must not be empty"
        )

        response = test_client.post("/tenants", json={"name": " ", "slug": "acme"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json() == {"message": "Tenant name must not be empty"}
