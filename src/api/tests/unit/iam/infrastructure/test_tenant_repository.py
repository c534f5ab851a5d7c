"""Unit tests for TenantRepository with a mocked session."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId, TenantRole, UserId
from iam.infrastructure.models import TenantMembershipModel, TenantModel
from iam.infrastructure.observability import TenantRepositoryProbe
from iam.infrastructure.tenant_repository import TenantRepository
from iam.ports.exceptions import DuplicateTenantSlugError
from iam.ports.repositories import ITenantRepository

OWNER = UserId("owner-1")


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_probe():
    """Create mock repository probe."""
    return MagicMock(spec=TenantRepositoryProbe)


@pytest.fixture
def repository(mock_session, mock_probe):
    """Create repository with mock session."""
    return TenantRepository(session=mock_session, probe=mock_probe)


def scalar_result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def tenant_model(tenant_id: str, slug: str = "acme") -> TenantModel:
    return TenantModel(
        id=tenant_id,
        name="Acme",
        slug=slug,
        plan="trial",
        status="active",
        memberships=[
            TenantMembershipModel(user_id="owner-1", role="owner", status="active")
        ],
    )


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement ITenantRepository protocol."""
        assert isinstance(repository, ITenantRepository)


class TestSave:
    """Tests for TenantRepository.save()."""

    @pytest.mark.asyncio
    async def test_adds_new_tenant_with_memberships(
        self, repository, mock_session, mock_probe
    ):
        """A new tenant is added with one row per membership."""
        tenant = Tenant.create(name="Acme", slug="acme", owner_id=OWNER)
        mock_session.execute.side_effect = [scalar_result(None), scalar_result(None)]

        await repository.save(tenant)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, TenantModel)
        assert added.id == tenant.id.value
        assert added.slug == "acme"
        assert [(m.user_id, m.role) for m in added.memberships] == [("owner-1", "owner")]
        mock_session.flush.assert_awaited_once()
        mock_probe.tenant_saved.assert_called_once_with(tenant.id.value, 1)

    @pytest.mark.asyncio
    async def test_slug_taken_by_other_tenant(self, repository, mock_session, mock_probe):
        """A slug owned by a different tenant raises before writing."""
        tenant = Tenant.create(name="Acme", slug="acme", owner_id=OWNER)
        other = tenant_model(TenantId.generate().value)
        mock_session.execute.return_value = scalar_result(other)

        with pytest.raises(DuplicateTenantSlugError):
            await repository.save(tenant)

        mock_session.flush.assert_not_awaited()
        mock_probe.duplicate_tenant_slug.assert_called_once_with("acme")

    @pytest.mark.asyncio
    async def test_unique_violation_on_flush(self, repository, mock_session):
        """A concurrent insert of the same slug is reported as a duplicate."""
        tenant = Tenant.create(name="Acme", slug="acme", owner_id=OWNER)
        mock_session.execute.side_effect = [scalar_result(None), scalar_result(None)]
        mock_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception('violates unique constraint "uq_tenants_slug"')
        )

        with pytest.raises(DuplicateTenantSlugError):
            await repository.save(tenant)

    @pytest.mark.asyncio
    async def test_updates_existing_memberships(self, repository, mock_session):
        """Saving an existing tenant updates and adds membership rows."""
        tenant = Tenant.create(name="Acme", slug="acme", owner_id=OWNER)
        tenant.add_member(UserId("member-1"), TenantRole.VIEWER)
        model = tenant_model(tenant.id.value)
        mock_session.execute.side_effect = [
            scalar_result(model),
            scalar_result(model),
        ]

        await repository.save(tenant)

        mock_session.add.assert_not_called()
        assert sorted((m.user_id, m.role) for m in model.memberships) == [
            ("member-1", "viewer"),
            ("owner-1", "owner"),
        ]


class TestGet:
    """Tests for the lookups."""

    @pytest.mark.asyncio
    async def test_get_by_slug_maps_to_domain(self, repository, mock_session):
        """Rows become a Tenant aggregate."""
        tenant_id = TenantId.generate().value
        mock_session.execute.return_value = scalar_result(tenant_model(tenant_id))

        tenant = await repository.get_by_slug("acme")

        assert tenant.id == TenantId(tenant_id)
        assert tenant.slug.value == "acme"
        assert tenant.plan.value == "trial"
        assert tenant.active_role_of(OWNER) == TenantRole.OWNER

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repository, mock_session):
        """A missing row gives None."""
        mock_session.execute.return_value = scalar_result(None)

        assert await repository.get_by_id(TenantId.generate()) is None

    @pytest.mark.asyncio
    async def test_list_for_user(self, repository, mock_session, mock_probe):
        """Every joined row becomes a tenant."""
        result = MagicMock()
        result.scalars.return_value.unique.return_value.all.return_value = [
            tenant_model(TenantId.generate().value, slug="a"),
            tenant_model(TenantId.generate().value, slug="b"),
        ]
        mock_session.execute.return_value = result

        tenants = await repository.list_for_user(OWNER)

        assert [t.slug.value for t in tenants] == ["a", "b"]
        mock_probe.tenants_listed_for_user.assert_called_once_with("owner-1", 2)
