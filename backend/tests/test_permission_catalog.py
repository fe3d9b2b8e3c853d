"""
Tests for the permission catalog and role defaults.
"""
import pytest

from teamaccess.config.permissions import (
    ALL_PERMISSIONS, DEFAULT_PERMISSIONS, DEFAULT_TEMPLATES, PERMISSION_GROUPS, PERMISSION_KEYS, ROLES,
    merge_onto_zero, role_defaults, zero_vector,
)
from teamaccess.models.user_permission import UserPermission
from teamaccess.schemas.permission import PermissionPatch, PermissionVector


class TestCatalog:

    def test_keys_follow_naming_convention(self):
        assert len(PERMISSION_KEYS) == 30
        assert all(key.startswith("can_view_") for key in PERMISSION_KEYS)

    def test_groups_in_display_order(self):
        assert PERMISSION_GROUPS == [
            "Atendimento", "CRM", "Projetos", "Disparos", "Administração", "Comunicação Interna",
        ]

    def test_every_key_has_label_and_description(self):
        for info in ALL_PERMISSIONS.values():
            assert info["label"]
            assert info["description"]

    def test_override_table_has_one_column_per_key(self):
        columns = set(UserPermission.__table__.columns.keys())
        assert set(PERMISSION_KEYS) <= columns

    def test_vector_schemas_generated_from_catalog(self):
        assert set(PermissionVector.model_fields) == set(PERMISSION_KEYS)
        assert set(PermissionPatch.model_fields) == set(PERMISSION_KEYS)
        assert PermissionVector().model_dump() == zero_vector()

    def test_default_templates_only_use_catalog_keys(self):
        for tpl in DEFAULT_TEMPLATES:
            assert tpl["permissions"] <= set(PERMISSION_KEYS)


class TestRoleDefaults:

    @pytest.mark.parametrize("role", ROLES)
    def test_defaults_range_over_catalog(self, role):
        assert set(role_defaults(role)) == set(PERMISSION_KEYS)
        assert DEFAULT_PERMISSIONS[role] <= set(PERMISSION_KEYS)

    @pytest.mark.parametrize("role", ["owner", "admin"])
    def test_owner_and_admin_get_everything(self, role):
        assert all(role_defaults(role).values())

    def test_manager_cannot_view_billing(self):
        defaults = role_defaults("manager")
        assert defaults["can_view_billing"] is False
        assert defaults["can_view_companies"] is True
        assert defaults["can_view_reports"] is True

    def test_agent_is_narrower_than_manager(self):
        agent = role_defaults("agent")
        assert agent["can_view_companies"] is False
        assert agent["can_view_map"] is False
        assert agent["can_view_crm"] is True
        assert DEFAULT_PERMISSIONS["agent"] < DEFAULT_PERMISSIONS["manager"]

    @pytest.mark.parametrize("role", [None, "", "viewer"])
    def test_unknown_role_falls_back_to_agent(self, role):
        assert role_defaults(role) == role_defaults("agent")


class TestMergeOntoZero:

    def test_missing_keys_become_false(self):
        vector = merge_onto_zero({"can_view_crm": True})
        assert vector["can_view_crm"] is True
        assert sum(vector.values()) == 1
        assert set(vector) == set(PERMISSION_KEYS)

    def test_unknown_keys_are_dropped(self):
        vector = merge_onto_zero({"can_fly": True})
        assert "can_fly" not in vector
        assert vector == zero_vector()

    def test_none_reads_as_false(self):
        assert merge_onto_zero({"can_view_chat": None})["can_view_chat"] is False
        assert merge_onto_zero(None) == zero_vector()
