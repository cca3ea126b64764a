"""Inventory API test cases."""
import pytest
from httpx import AsyncClient
from sqlmodel import select

from apps.catalog.models import Product
from apps.inventory.models import InventoryTransaction, TransactionType
from apps.inventory.service import stock_delta
from framework.exceptions.handler import BusinessException


class TestStockDelta:

    @pytest.mark.parametrize("transaction_type, quantity, expected", [
        (TransactionType.RECEIPT, 5, 5),
        (TransactionType.RETURN, 2, 2),
        (TransactionType.SALE, 3, -3),
        (TransactionType.ADJUSTMENT, -4, -4),
    ])
    def test_sign(self, transaction_type, quantity, expected):
        assert stock_delta(transaction_type, quantity) == expected

    @pytest.mark.parametrize("transaction_type, quantity", [
        (TransactionType.SALE, 0),
        (TransactionType.RECEIPT, -1),
        (TransactionType.ADJUSTMENT, 0),
    ])
    def test_rejects_invalid_quantity(self, transaction_type, quantity):
        with pytest.raises(BusinessException):
            stock_delta(transaction_type, quantity)


class TestRecordTransaction:

    async def test_sale_updates_stock_and_logs_movement(self, admin_client: AsyncClient, sample_product, async_session):
        response = await admin_client.post(
            "/api/v1/inventory/transactions",
            json={"product_id": sample_product.id, "transaction_type": "SALE", "quantity": 2},
        )

        data = response.json()
        assert data["code"] == 200
        assert data["data"]["quantity"] == -2
        assert data["data"]["stock_after"] == 3

        product_id = sample_product.id
        async_session.expire_all()
        product = (await async_session.exec(select(Product).where(Product.id == product_id))).one()
        assert product.stock == 3
        assert product.version == 2

    async def test_oversell_changes_nothing(self, admin_client: AsyncClient, sample_product, async_session):
        response = await admin_client.post(
            "/api/v1/inventory/transactions",
            json={"product_id": sample_product.id, "transaction_type": "SALE", "quantity": 50},
        )

        assert response.json()["code"] == 400
        movements = (await async_session.exec(select(InventoryTransaction))).all()
        assert movements == []

    async def test_unknown_product_is_not_found(self, admin_client: AsyncClient, sample_tenant):
        response = await admin_client.post(
            "/api/v1/inventory/transactions",
            json={"product_id": 404, "transaction_type": "RECEIPT", "quantity": 1},
        )
        assert response.json()["code"] == 404

    async def test_history_newest_first(self, admin_client: AsyncClient, sample_product):
        for transaction_type, quantity in [("RECEIPT", 10), ("SALE", 4), ("ADJUSTMENT", -1)]:
            await admin_client.post(
                "/api/v1/inventory/transactions",
                json={"product_id": sample_product.id, "transaction_type": transaction_type, "quantity": quantity},
            )

        response = await admin_client.get(
            "/api/v1/inventory/transactions", params={"product_id": sample_product.id}
        )

        history = response.json()["data"]
        assert [(m["transaction_type"], m["stock_after"]) for m in history] == [
            ("ADJUSTMENT", 10),
            ("SALE", 11),
            ("RECEIPT", 15),
        ]
