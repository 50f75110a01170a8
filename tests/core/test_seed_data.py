import pytest
from django.core.management import call_command

from accounts.models import Role, User
from campaigns.models import Campaign
from influencers.models import Influencer
from stores.models import Store

pytestmark = pytest.mark.django_db


def test_seed_data_is_idempotent():
    call_command("seed_data")
    call_command("seed_data")

    assert Role.objects.count() == 3
    assert Store.objects.count() == 2
    assert Influencer.objects.count() == 3
    campaign = Campaign.objects.get(name="Summer Launch")
    assert campaign.influencer_links.count() == 2
    assert campaign.product_links.get().quantity == 10

    admin = User.objects.get(email="admin@crm.local")
    assert admin.role_names == [Role.ADMIN]
    assert admin.check_password("admin123!")


def test_reset_passwords_option():
    call_command("seed_data")
    user = User.objects.get(email="manager@crm.local")
    user.set_password("changed")
    user.save()

    call_command("seed_data", reset_passwords=True)
    user.refresh_from_db()
    assert user.check_password("manager123!")
