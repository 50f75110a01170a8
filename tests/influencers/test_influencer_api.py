import pytest

from influencers.models import Influencer
from influencers.services import DuplicateInfluencer, create_from_scraped_profile

pytestmark = pytest.mark.django_db


SCRAPED = {
    "username": "runwithmira",
    "full_name": "Mira Runner",
    "biography": "Marathons and oat milk",
    "followers_count": 91200,
    "emails": ["mira@runmail.test"],
    "phones": ["+49 170 000000"],
    "profile_url": "https://instagram.com/runwithmira",
}


def test_scraped_profile_maps_to_influencer():
    influencer = create_from_scraped_profile(SCRAPED)
    assert influencer.name == "Mira Runner"
    assert influencer.email == "mira@runmail.test"
    assert influencer.phone == "+49 170 000000"
    assert influencer.followers == 91200
    assert influencer.platform == "Instagram"
    assert influencer.status == Influencer.Status.COLD


def test_scraped_profile_without_email_uses_handle_address():
    influencer = create_from_scraped_profile({"username": "quietcreator"})
    assert influencer.name == "quietcreator"
    assert influencer.email == "quietcreator@instagram.com"


def test_scraped_profile_overrides_win():
    influencer = create_from_scraped_profile(SCRAPED, {"name": "Mira R.", "status": "ACTIVE"})
    assert influencer.name == "Mira R."
    assert influencer.status == "ACTIVE"


def test_scraped_profile_duplicate_email_raises(influencer):
    with pytest.raises(DuplicateInfluencer):
        create_from_scraped_profile({"username": "lena", "emails": ["LENA@example.com"]})


def test_create_and_search(manager_client, coordinator_client):
    response = manager_client.post(
        "/api/v1/influencers/",
        {"name": "Tom Trails", "email": "tom@trails.test", "platform": "TikTok", "followers": 1200},
        format="json",
    )
    assert response.status_code == 201
    assert response.json()["status"] == "COLD"

    found = coordinator_client.get("/api/v1/influencers/?search=trails")
    assert [row["email"] for row in found.json()["data"]] == ["tom@trails.test"]


def test_duplicate_email_is_400(manager_client, influencer):
    response = manager_client.post(
        "/api/v1/influencers/", {"name": "Copy", "email": influencer.email}, format="json",
    )
    assert response.status_code == 400
    assert "email" in response.json()


def test_filter_by_status_and_platform(coordinator_client, influencer):
    Influencer.objects.create(name="Other", email="other@example.com", platform="YouTube", status="ACTIVE")
    response = coordinator_client.get("/api/v1/influencers/?platform=instagram&status=COLD")
    assert [row["id"] for row in response.json()["data"]] == [str(influencer.pk)]


def test_from_scraped_data_endpoint(manager_client):
    response = manager_client.post(
        "/api/v1/influencers/from-scraped-data/", {"scraped_data": SCRAPED}, format="json",
    )
    assert response.status_code == 201
    assert response.json()["email"] == "mira@runmail.test"

    again = manager_client.post(
        "/api/v1/influencers/from-scraped-data/", {"scraped_data": SCRAPED}, format="json",
    )
    assert again.status_code == 409


def test_from_scraped_data_requires_username(manager_client):
    response = manager_client.post(
        "/api/v1/influencers/from-scraped-data/", {"scraped_data": {"full_name": "No Handle"}}, format="json",
    )
    assert response.status_code == 400


def test_check_email(coordinator_client, influencer):
    taken = coordinator_client.get("/api/v1/influencers/check-email/?email=Lena@Example.com")
    assert taken.json() == {"email": "Lena@Example.com", "exists": True}

    free = coordinator_client.get("/api/v1/influencers/check-email/?email=nobody@example.com")
    assert free.json()["exists"] is False

    missing = coordinator_client.get("/api/v1/influencers/check-email/")
    assert missing.status_code == 400
