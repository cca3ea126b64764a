"""
Repository wiring: which repository class serves which model.
Built once at import; every request's UnitOfWork resolves repositories from it.
"""
from framework.repository.registry import RepositoryRegistry
from apps.models import Tenant, User, Category, Product, InventoryTransaction
from apps.identity.repository import TenantRepository, UserRepository
from apps.catalog.repository import CategoryRepository, ProductRepository
from apps.inventory.repository import InventoryTransactionRepository


def build_registry() -> RepositoryRegistry:
    return (
        RepositoryRegistry()
        .register(Tenant, TenantRepository)
        .register(User, UserRepository)
        .register(Category, CategoryRepository)
        .register(Product, ProductRepository)
        .register(InventoryTransaction, InventoryTransactionRepository)
    )


repository_registry = build_registry()
