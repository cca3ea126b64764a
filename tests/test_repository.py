"""Generic repository query tests."""
import pytest
from decimal import Decimal
from pydantic import ValidationError

from apps.catalog.models import Product
from apps.identity.models import Tenant
from framework.repository.base import Page
from framework.repository.registry import RepositoryRegistry
from framework.repository.base import BaseRepository


@pytest.fixture
async def catalog(async_session, sample_tenant):
    """Five products in tenant 1, one in tenant 2."""
    async_session.add(Tenant(id=2, name="other_tenant"))
    for i, (sku, price, active) in enumerate([
        ("A-1", "10.00", True),
        ("B-2", "50.00", True),
        ("C-3", "30.00", False),
        ("D-4", "20.00", True),
        ("E-5", "40.00", True),
    ], start=1):
        async_session.add(Product(id=i, tenant_id=1, sku=sku, name=sku, price=Decimal(price), is_active=active))
    async_session.add(Product(id=6, tenant_id=2, sku="A-1", name="foreign", price=Decimal("1.00")))
    await async_session.commit()


class TestList:

    async def test_filters_by_column_equality(self, make_uow, catalog):
        async with make_uow() as uow:
            products = await uow.repository(Product).list(filters={"tenant_id": 1, "is_active": True})
        assert [p.sku for p in products] == ["A-1", "B-2", "D-4", "E-5"]

    async def test_orders_by_caller_key(self, make_uow, catalog):
        async with make_uow() as uow:
            products = await uow.repository(Product).list(
                filters={"tenant_id": 1}, order_by="price", descending=True
            )
        assert [p.sku for p in products] == ["B-2", "E-5", "C-3", "D-4", "A-1"]

    async def test_paginates(self, make_uow, catalog):
        async with make_uow() as uow:
            repo = uow.repository(Product)
            first = await repo.list(filters={"tenant_id": 1}, page=Page(limit=2, offset=0))
            second = await repo.list(filters={"tenant_id": 1}, page=Page(limit=2, offset=2))
            last = await repo.list(filters={"tenant_id": 1}, page=Page(limit=2, offset=4))
        assert [p.id for p in first] == [1, 2]
        assert [p.id for p in second] == [3, 4]
        assert [p.id for p in last] == [5]

    async def test_unknown_column_is_rejected(self, make_uow, catalog):
        async with make_uow() as uow:
            with pytest.raises(ValueError):
                await uow.repository(Product).list(filters={"colour": "red"})
            with pytest.raises(ValueError):
                await uow.repository(Product).list(order_by="colour")

    def test_page_bounds(self):
        with pytest.raises(ValidationError):
            Page(limit=0)
        with pytest.raises(ValidationError):
            Page(offset=-1)

    async def test_get_all_paginates_without_filters(self, make_uow, catalog):
        async with make_uow() as uow:
            products = await uow.repository(Product).get_all(limit=10, offset=4)
        assert [p.id for p in products] == [5, 6]


class TestFinders:

    async def test_find_one_and_count(self, make_uow, catalog):
        async with make_uow() as uow:
            repo = uow.repository(Product)
            assert (await repo.find_one(tenant_id=2, sku="A-1")).name == "foreign"
            assert await repo.find_one(tenant_id=2, sku="B-2") is None
            assert await repo.count(tenant_id=1) == 5
            assert await repo.count(tenant_id=1, is_active=False) == 1

    async def test_tenant_scoped_lookup(self, make_uow, catalog):
        async with make_uow() as uow:
            repo = uow.repository(Product)
            assert await repo.get_by_id_and_tenant(6, 1) is None
            assert (await repo.get_by_id_and_tenant(6, 2)).sku == "A-1"

    async def test_search_newest_first_active_only(self, make_uow, catalog):
        async with make_uow() as uow:
            products = await uow.repository(Product).search(1, name_contains="-")
        assert [p.sku for p in products] == ["E-5", "D-4", "B-2", "A-1"]

    async def test_reads_are_detached(self, make_uow, catalog):
        async with make_uow() as uow:
            product = await uow.repository(Product).get_by_id(1)
            assert product not in uow.session


class TestStagingGuards:

    async def test_wrong_entity_type_is_rejected(self, make_uow, sample_tenant):
        async with make_uow() as uow:
            with pytest.raises(TypeError):
                uow.repository(Product).add(Tenant(name="not a product"))

    async def test_staging_is_recorded_in_order(self, make_uow, sample_tenant):
        async with make_uow() as uow:
            repo = uow.repository(Product)
            repo.add(Product(tenant_id=1, sku="X", name="X"))
            repo.remove(5)
            assert [change.kind.value for change in uow.context.pending] == ["add", "delete"]


class TestRegistry:

    def test_register_rejects_non_repository(self):
        with pytest.raises(TypeError):
            RepositoryRegistry().register(Product, dict)

    def test_resolve_falls_back_to_base(self):
        registry = RepositoryRegistry()
        assert registry.resolve(Product) is BaseRepository
        assert Product not in registry
        assert len(registry) == 0
