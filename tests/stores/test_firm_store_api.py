import pytest
from rest_framework.test import APIClient

from accounts.models import Role, User
from stores.models import AuditLog, Firm, Store

pytestmark = pytest.mark.django_db


def test_list_firms_uses_pagination_envelope(coordinator_client, firm, other_firm):
    response = coordinator_client.get("/api/v1/firms/?limit=1")
    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}


def test_admin_creates_firm_and_audit_entry(admin_client, admin_user):
    response = admin_client.post(
        "/api/v1/firms/", {"name": "Initech", "email": "ops@initech.test"}, format="json",
    )
    assert response.status_code == 201
    firm = Firm.objects.get(name="Initech")
    entry = AuditLog.objects.get(entity_type="Firm", entity_id=str(firm.pk))
    assert entry.action == "firm.create"
    assert entry.actor == admin_user
    assert entry.after_json["name"] == "Initech"


def test_manager_cannot_update_or_delete_firm(manager_client, firm):
    assert manager_client.patch(
        f"/api/v1/firms/{firm.pk}/", {"name": "Renamed"}, format="json",
    ).status_code == 403
    assert manager_client.delete(f"/api/v1/firms/{firm.pk}/").status_code == 403
    firm.refresh_from_db()
    assert firm.name == "Acme Brands"


def test_firm_stores_for_own_firm(manager_client, firm, store, second_store, other_store):
    response = manager_client.get(f"/api/v1/firms/{firm.pk}/stores/")
    assert response.status_code == 200
    names = {row["name"] for row in response.json()["data"]}
    assert names == {store.name, second_store.name}


def test_firm_stores_for_other_firm_is_forbidden(manager_client, other_firm, other_store):
    response = manager_client.get(f"/api/v1/firms/{other_firm.pk}/stores/")
    assert response.status_code == 403
    assert response.json()["detail"] == "Requested resource belongs to another firm"


def test_firm_stores_without_caller_firm_is_forbidden(roles, firm):
    user = User.objects.create_user(email="floating@test.com", password="x", roles=[Role.MANAGER])
    client = APIClient()
    client.force_authenticate(user=user)
    response = client.get(f"/api/v1/firms/{firm.pk}/stores/")
    assert response.status_code == 403
    assert response.json()["detail"] == "Firm context required to access this resource"


def test_store_crud(manager_client, firm):
    created = manager_client.post(
        "/api/v1/stores/",
        {"firm_id": str(firm.pk), "name": "Pop-up Munich", "city": "Munich"},
        format="json",
    )
    assert created.status_code == 201
    store_id = created.json()["id"]
    assert created.json()["firm_name"] == firm.name

    updated = manager_client.patch(f"/api/v1/stores/{store_id}/", {"city": "Munchen"}, format="json")
    assert updated.status_code == 200
    assert updated.json()["city"] == "Munchen"

    assert manager_client.delete(f"/api/v1/stores/{store_id}/").status_code == 204
    assert not Store.objects.filter(pk=store_id).exists()
    assert AuditLog.objects.filter(entity_type="Store", action="store.delete").count() == 1


def test_store_list_filters_by_firm(coordinator_client, store, other_store, other_firm):
    response = coordinator_client.get(f"/api/v1/stores/?firm_id={other_firm.pk}")
    assert [row["name"] for row in response.json()["data"]] == [other_store.name]


def test_unknown_store_is_404(manager_client, roles):
    response = manager_client.get("/api/v1/stores/00000000-0000-0000-0000-000000000000/")
    assert response.status_code == 404


def test_manager_cannot_create_store_for_other_firm(manager_client, other_firm):
    response = manager_client.post(
        "/api/v1/stores/", {"firm_id": str(other_firm.pk), "name": "Sneaky"}, format="json",
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Requested resource belongs to another firm"
    assert not Store.objects.filter(name="Sneaky").exists()


def test_manager_cannot_change_or_delete_other_firms_store(manager_client, other_store):
    url = f"/api/v1/stores/{other_store.pk}/"
    assert manager_client.patch(url, {"city": "Nowhere"}, format="json").status_code == 403
    assert manager_client.put(
        url, {"firm_id": str(other_store.firm_id), "name": "Taken"}, format="json",
    ).status_code == 403
    assert manager_client.delete(url).status_code == 403

    other_store.refresh_from_db()
    assert other_store.name == "Globex Outlet"
    assert not AuditLog.objects.filter(entity_type="Store").exists()


def test_manager_cannot_move_own_store_to_other_firm(manager_client, store, other_firm):
    response = manager_client.patch(
        f"/api/v1/stores/{store.pk}/", {"firm_id": str(other_firm.pk)}, format="json",
    )
    assert response.status_code == 403
    store.refresh_from_db()
    assert store.firm_id != other_firm.pk


def test_other_firms_store_is_still_readable(coordinator_client, other_store):
    response = coordinator_client.get(f"/api/v1/stores/{other_store.pk}/")
    assert response.status_code == 200
    assert response.json()["name"] == "Globex Outlet"
