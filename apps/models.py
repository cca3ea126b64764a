"""
Model registration for migrations and metadata: import every table model here.
When adding/removing apps, add/remove the corresponding imports here.
"""
from apps.identity.models import Tenant, User
from apps.catalog.models import Category, Product
from apps.inventory.models import InventoryTransaction

__all__ = ["Tenant", "User", "Category", "Product", "InventoryTransaction"]
