"""
Tests for role ranking, capability checks and category parsing.
"""
import pytest

from pricecheck.models import ProductCategory, Role
from pricecheck.models.category import InvalidCategory, ValidCategory, parse_category
from pricecheck.services.auth import Identity
from pricecheck.services.authorization import MINIMUM_ROLE, ROLE_RANK, Capability, is_allowed


def _identity(role: Role) -> Identity:
    return Identity(user_id=1, email="someone@example.com", role=role)


class TestIsAllowed:
    @pytest.mark.parametrize("capability,role,expected", [
        (Capability.RESOLVE_SHOPPING_LIST, Role.BASIC, True),
        (Capability.VIEW_CHEAPEST_OFFER, Role.BASIC, True),
        (Capability.CREATE_PRODUCT, Role.BASIC, False),
        (Capability.CREATE_PRODUCT, Role.VERIFIED, True),
        (Capability.VIEW_CATEGORY_PRICES, Role.BASIC, False),
        (Capability.VIEW_CATEGORY_PRICES, Role.VERIFIED, True),
        (Capability.DELETE_PRODUCT, Role.VERIFIED, False),
        (Capability.DELETE_PRODUCT, Role.ADMIN, True),
        (Capability.DELETE_INVENTORY, Role.VERIFIED, False),
        (Capability.MANAGE_USERS, Role.ADMIN, True),
    ])
    def test_minimum_roles(self, capability, role, expected):
        assert is_allowed(_identity(role), capability) is expected

    def test_every_capability_has_a_minimum_role(self):
        assert set(MINIMUM_ROLE) == set(Capability)

    def test_higher_roles_keep_lower_permissions(self):
        roles = sorted(Role, key=ROLE_RANK.get)
        for capability in Capability:
            granted = [is_allowed(_identity(role), capability) for role in roles]
            # Once granted, granted for every higher role
            assert granted == sorted(granted)

    def test_admin_can_do_everything(self):
        assert all(is_allowed(_identity(Role.ADMIN), c) for c in Capability)


class TestParseCategory:
    def test_exact_name(self):
        assert parse_category("DAIRY") == ValidCategory(ProductCategory.DAIRY)

    def test_case_and_whitespace_insensitive(self):
        assert parse_category("  personal_care ") == ValidCategory(ProductCategory.PERSONAL_CARE)

    def test_unknown_category(self):
        result = parse_category("Toys")

        assert isinstance(result, InvalidCategory)
        assert result.raw == "Toys"
        assert "Toys" in result.message
        assert "DAIRY" in result.message

    def test_empty_string(self):
        assert isinstance(parse_category(""), InvalidCategory)
