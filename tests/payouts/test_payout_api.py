import uuid
from decimal import Decimal

import pytest

from payouts import services as payout_services
from payouts.models import DocumentLink, Payout
from stores.models import AuditLog

pytestmark = pytest.mark.django_db


@pytest.fixture
def payout(influencer, campaign):
    return payout_services.create_payout(
        type=Payout.Type.INFLUENCER_COMMISSION,
        amount=Decimal("750.00"),
        influencer=influencer,
        campaign=campaign,
    )


def test_create_payout(manager_client, manager_user, influencer, campaign):
    response = manager_client.post(
        "/api/v1/payouts/",
        {
            "type": "CAMPAIGN_PAYMENT",
            "amount": "1250.00",
            "influencer_id": str(influencer.pk),
            "campaign_id": str(campaign.pk),
            "po_id": "PO-7",
        },
        format="json",
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["currency"] == "USD"
    assert body["requested_at"]
    assert body["status_history"][0]["notes"] == "Payout created"
    assert body["status_history"][0]["user_id"] == str(manager_user.pk)


def test_create_payout_rejects_negative_amount(manager_client):
    response = manager_client.post(
        "/api/v1/payouts/", {"type": "CAMPAIGN_PAYMENT", "amount": "-5"}, format="json",
    )
    assert response.status_code == 400


def test_create_payout_unknown_influencer_is_404(manager_client):
    response = manager_client.post(
        "/api/v1/payouts/",
        {"type": "CAMPAIGN_PAYMENT", "amount": "5", "influencer_id": str(uuid.uuid4())},
        format="json",
    )
    assert response.status_code == 404


def test_status_put_stamps_timestamp_and_history(manager_client, payout):
    response = manager_client.put(
        f"/api/v1/payouts/{payout.pk}/status/", {"status": "APPROVED", "notes": "Budget ok"}, format="json",
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "APPROVED"
    assert body["approved_at"]
    assert body["paid_at"] is None
    assert [h["status"] for h in body["status_history"]] == ["PENDING", "APPROVED"]
    assert body["status_history"][-1]["notes"] == "Budget ok"

    entry = AuditLog.objects.get(action="payout.status")
    assert entry.after_json == {"status": "APPROVED"}
    assert entry.firm == payout.campaign.store.firm


def test_same_status_does_not_grow_history(payout):
    payout = payout_services.update_payout(payout, status="PENDING", amount=Decimal("800.00"))
    assert len(payout.status_history) == 1
    assert payout.amount == Decimal("800.00")


def test_partial_update_to_paid(manager_client, payout):
    response = manager_client.patch(f"/api/v1/payouts/{payout.pk}/", {"status": "PAID"}, format="json")
    assert response.status_code == 200
    assert response.json()["paid_at"]


def test_timeline_and_audit_trail(coordinator_client, payout):
    payout_services.update_payment_status(payout, "PROCESSING")
    timeline = coordinator_client.get(f"/api/v1/payouts/{payout.pk}/timeline/").json()
    assert timeline["status"] == "PROCESSING"
    assert timeline["timeline"]["processing"]
    assert timeline["timeline"]["paid"] is None
    assert len(timeline["history"]) == 2

    trail = coordinator_client.get(f"/api/v1/payouts/{payout.pk}/audit-trail/").json()
    assert [h["status"] for h in trail["audit_trail"]] == ["PENDING", "PROCESSING"]


def test_by_influencer(coordinator_client, payout, influencer):
    response = coordinator_client.get(f"/api/v1/payouts/by-influencer/{influencer.pk}/")
    body = response.json()
    assert body["influencer"]["name"] == influencer.name
    assert body["stats"]["total_payouts"] == 1
    assert body["stats"]["by_type"] == {"INFLUENCER_COMMISSION": 1}

    assert coordinator_client.get(f"/api/v1/payouts/by-influencer/{uuid.uuid4()}/").status_code == 404


def test_by_campaign_reports_budget_utilization(coordinator_client, payout, campaign):
    payout_services.create_payout(type="CAMPAIGN_PAYMENT", amount=Decimal("250.00"), campaign=campaign)
    body = coordinator_client.get(f"/api/v1/payouts/by-campaign/{campaign.pk}/").json()
    assert body["stats"]["total_payouts"] == 2
    assert Decimal(str(body["stats"]["total_amount"])) == Decimal("1000.00")
    assert body["stats"]["budget_utilization"] == pytest.approx(20.0)
    assert body["stats"]["by_status"] == {"PENDING": 2}


def test_summary_of_nothing():
    assert payout_services.summarize([]) == {
        "total_payouts": 0, "total_amount": Decimal("0"), "by_status": {}, "by_type": {},
    }


# ---------------------------------------------------------------------------
# document links
# ---------------------------------------------------------------------------

LINK = {
    "primary_document_id": "inv-1",
    "primary_document_type": "INVOICE",
    "linked_document_id": "po-1",
    "linked_document_type": "PO",
    "relationship": "invoice_for_po",
}


def test_link_documents_and_query_both_directions(manager_client):
    response = manager_client.post("/api/v1/payouts/link-documents/", LINK, format="json")
    assert response.status_code == 201

    for document_id in ("inv-1", "po-1"):
        rows = manager_client.get(f"/api/v1/payouts/document-links/{document_id}/").json()
        assert [row["relationship"] for row in rows] == ["invoice_for_po"]


def test_duplicate_link_is_400(manager_client):
    manager_client.post("/api/v1/payouts/link-documents/", LINK, format="json")
    response = manager_client.post("/api/v1/payouts/link-documents/", LINK, format="json")
    assert response.status_code == 400
    assert response.json()["detail"] == "Document link already exists"


def test_invalid_document_type_is_400(manager_client):
    response = manager_client.post(
        "/api/v1/payouts/link-documents/", {**LINK, "primary_document_type": "RECEIPT"}, format="json",
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid primary document type. Must be one of: INVOICE, PO, PAYOUT"


def test_delete_document_link(manager_client):
    link = payout_services.link_documents(**LINK)
    assert manager_client.delete(f"/api/v1/payouts/document-links/{link.pk}/").status_code == 204
    assert not DocumentLink.objects.exists()
    assert manager_client.delete(f"/api/v1/payouts/document-links/{uuid.uuid4()}/").status_code == 404
