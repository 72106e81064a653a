"""
Role-based authorization.

Roles are ordered BASIC < VERIFIED < ADMIN; every gated action is a
Capability with a minimum role, and ``is_allowed`` is the single predicate
the API consults.
"""
import enum

from pricecheck.models import Role
from pricecheck.services.auth import Identity

ROLE_RANK = {
    Role.BASIC: 1,
    Role.VERIFIED: 2,
    Role.ADMIN: 3,
}


class Capability(str, enum.Enum):
    RESOLVE_SHOPPING_LIST = "resolve_shopping_list"
    VIEW_INVENTORY = "view_inventory"
    VIEW_SUPERMARKETS = "view_supermarkets"
    VIEW_CHEAPEST_OFFER = "view_cheapest_offer"
    CREATE_PRODUCT = "create_product"
    UPDATE_PRODUCT = "update_product"
    WRITE_INVENTORY = "write_inventory"
    VIEW_CATEGORY_PRICES = "view_category_prices"
    EDIT_PRODUCT_FIELDS = "edit_product_fields"
    DELETE_PRODUCT = "delete_product"
    MANAGE_SUPERMARKETS = "manage_supermarkets"
    DELETE_INVENTORY = "delete_inventory"
    MANAGE_USERS = "manage_users"


MINIMUM_ROLE = {
    Capability.RESOLVE_SHOPPING_LIST: Role.BASIC,
    Capability.VIEW_INVENTORY: Role.BASIC,
    Capability.VIEW_SUPERMARKETS: Role.BASIC,
    Capability.VIEW_CHEAPEST_OFFER: Role.BASIC,
    Capability.CREATE_PRODUCT: Role.VERIFIED,
    Capability.UPDATE_PRODUCT: Role.VERIFIED,
    Capability.WRITE_INVENTORY: Role.VERIFIED,
    Capability.VIEW_CATEGORY_PRICES: Role.VERIFIED,
    Capability.EDIT_PRODUCT_FIELDS: Role.ADMIN,
    Capability.DELETE_PRODUCT: Role.ADMIN,
    Capability.MANAGE_SUPERMARKETS: Role.ADMIN,
    Capability.DELETE_INVENTORY: Role.ADMIN,
    Capability.MANAGE_USERS: Role.ADMIN,
}


def is_allowed(identity: Identity, capability: Capability) -> bool:
    """Check whether the caller's role reaches the capability's minimum role."""
    return ROLE_RANK[identity.role] >= ROLE_RANK[MINIMUM_ROLE[capability]]
