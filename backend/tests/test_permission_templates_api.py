"""
Tests for the /api/permission-templates endpoints.
"""
import uuid

import pytest

from teamaccess.models import PermissionTemplate
from teamaccess.schemas.permission_template import TemplateResponse


def _create(client, user, auth, **body):
    body.setdefault("name", "Vendedor")
    body.setdefault("permissions", {"can_view_crm": True})
    return client.post("/api/permission-templates", json=body, headers=auth(user))


class TestCreateTemplate:

    def test_owner_creates_org_template(self, client, owner, org, auth):
        resp = _create(client, owner, auth, description="Equipe comercial", icon="Briefcase")
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Vendedor"
        assert body["description"] == "Equipe comercial"
        assert body["icon"] == "Briefcase"
        assert body["permissions"] == {"can_view_crm": True}
        assert body["organization_id"] == str(org.id)
        assert body["is_default"] is False
        assert body["sort_order"] == 1

    def test_superadmin_creates_global_template(self, client, superadmin, auth):
        body = _create(client, superadmin, auth).json()
        assert body["organization_id"] is None

    def test_icon_defaults_to_users(self, client, owner, auth):
        assert _create(client, owner, auth).json()["icon"] == "Users"

    def test_sort_order_increments(self, client, owner, auth):
        first = _create(client, owner, auth, name="A").json()
        second = _create(client, owner, auth, name="B").json()
        assert second["sort_order"] == first["sort_order"] + 1

    def test_unknown_keys_are_dropped(self, client, owner, auth):
        body = _create(client, owner, auth, permissions={"can_view_crm": True, "can_fly": True}).json()
        assert body["permissions"] == {"can_view_crm": True}

    @pytest.mark.parametrize("missing", ["name", "permissions"])
    def test_name_and_permissions_required(self, client, owner, auth, missing):
        body = {"name": "Vendedor", "permissions": {"can_view_crm": True}}
        body.pop(missing)
        resp = client.post("/api/permission-templates", json=body, headers=auth(owner))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Nome e permissões são obrigatórios"}

    def test_empty_name_is_rejected(self, client, owner, auth):
        assert _create(client, owner, auth, name="").status_code == 400

    @pytest.mark.parametrize("role", ["admin", "manager", "agent"])
    def test_non_owner_roles_are_forbidden(self, client, make_user, org, auth, role):
        caller = make_user(org, role=role)
        resp = _create(client, caller, auth)
        assert resp.status_code == 403
        assert "error" in resp.json()


def test_response_schema_reads_orm_rows(db):
    tpl = PermissionTemplate(name="Gerente", permissions={"can_view_reports": True}, sort_order=3)
    db.add(tpl)
    db.commit()
    db.refresh(tpl)

    body = TemplateResponse.model_validate(tpl)
    assert body.id == tpl.id
    assert body.icon == "Users"
    assert body.organization_id is None


class TestListTemplates:

    def test_ordered_by_sort_order(self, client, owner, agent, db, auth):
        _create(client, owner, auth, name="Primeiro")
        _create(client, owner, auth, name="Segundo")
        db.query(PermissionTemplate).filter(PermissionTemplate.name == "Primeiro").update({"sort_order": 99})
        db.commit()

        names = [t["name"] for t in client.get("/api/permission-templates", headers=auth(agent)).json()]
        assert names == ["Segundo", "Primeiro"]

    def test_members_see_global_and_own_org_only(self, client, owner, superadmin, make_user, make_org, agent, auth):
        _create(client, superadmin, auth, name="Global")
        _create(client, owner, auth, name="Nosso")
        outsider_owner = make_user(make_org("Other"), role="owner")
        _create(client, outsider_owner, auth, name="Deles")

        names = {t["name"] for t in client.get("/api/permission-templates", headers=auth(agent)).json()}
        assert names == {"Global", "Nosso"}

        all_names = {t["name"] for t in client.get("/api/permission-templates", headers=auth(superadmin)).json()}
        assert all_names == {"Global", "Nosso", "Deles"}

    def test_trailing_slash_is_served_without_redirect(self, client, owner, auth):
        created = client.post("/api/permission-templates/", json={"name": "Vendedor", "permissions": {}},
                              headers=auth(owner), follow_redirects=False)
        assert created.status_code == 201

        resp = client.get("/api/permission-templates/", headers=auth(owner), follow_redirects=False)
        assert resp.status_code == 200
        assert [t["name"] for t in resp.json()] == ["Vendedor"]

    def test_requires_authentication(self, client):
        assert client.get("/api/permission-templates").status_code == 401


class TestUpdateTemplate:

    def test_omitted_fields_are_kept(self, client, owner, auth):
        tpl = _create(client, owner, auth, description="Desc", icon="Crown").json()

        resp = client.put(f"/api/permission-templates/{tpl['id']}", json={"name": "Renomeado"}, headers=auth(owner))
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Renomeado"
        assert body["description"] == "Desc"
        assert body["icon"] == "Crown"
        assert body["permissions"] == tpl["permissions"]

    def test_replace_permissions(self, client, owner, auth):
        tpl = _create(client, owner, auth).json()
        body = client.put(
            f"/api/permission-templates/{tpl['id']}",
            json={"permissions": {"can_view_billing": True}},
            headers=auth(owner),
        ).json()
        assert body["permissions"] == {"can_view_billing": True}

    def test_missing_template_is_404(self, client, owner, auth):
        resp = client.put(f"/api/permission-templates/{uuid.uuid4()}", json={"name": "X"}, headers=auth(owner))
        assert resp.status_code == 404

    def test_admin_is_forbidden(self, client, owner, admin, auth):
        tpl = _create(client, owner, auth).json()
        resp = client.put(f"/api/permission-templates/{tpl['id']}", json={"name": "X"}, headers=auth(admin))
        assert resp.status_code == 403

    def test_owner_cannot_edit_global_template(self, client, owner, superadmin, auth):
        tpl = _create(client, superadmin, auth).json()
        resp = client.put(f"/api/permission-templates/{tpl['id']}", json={"name": "X"}, headers=auth(owner))
        assert resp.status_code == 403

    def test_owner_cannot_see_other_org_template(self, client, owner, make_user, make_org, auth):
        outsider_owner = make_user(make_org("Other"), role="owner")
        tpl = _create(client, outsider_owner, auth).json()
        resp = client.put(f"/api/permission-templates/{tpl['id']}", json={"name": "X"}, headers=auth(owner))
        assert resp.status_code == 404


class TestDeleteTemplate:

    def test_delete(self, client, owner, auth):
        tpl = _create(client, owner, auth).json()
        resp = client.delete(f"/api/permission-templates/{tpl['id']}", headers=auth(owner))
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert client.get("/api/permission-templates", headers=auth(owner)).json() == []

    def test_delete_missing_is_404(self, client, owner, auth):
        resp = client.delete(f"/api/permission-templates/{uuid.uuid4()}", headers=auth(owner))
        assert resp.status_code == 404
        assert resp.json() == {"error": "Template não encontrado"}

    def test_agent_cannot_delete(self, client, owner, agent, auth):
        tpl = _create(client, owner, auth).json()
        assert client.delete(f"/api/permission-templates/{tpl['id']}", headers=auth(agent)).status_code == 403

    def test_superadmin_deletes_any(self, client, owner, superadmin, auth):
        tpl = _create(client, owner, auth).json()
        assert client.delete(f"/api/permission-templates/{tpl['id']}", headers=auth(superadmin)).status_code == 200
