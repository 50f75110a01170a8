from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import Role, User
from accounts.services import ensure_default_roles
from campaigns.models import Campaign
from catalog.models import Product
from influencers.models import Influencer
from stores.models import Firm, Store


@pytest.fixture
def roles(db):
    return ensure_default_roles()


@pytest.fixture
def firm(db):
    return Firm.objects.create(name="Acme Brands", email="hello@acme.test", city="Berlin")


@pytest.fixture
def other_firm(db):
    return Firm.objects.create(name="Globex", email="hello@globex.test")


@pytest.fixture
def store(firm):
    return Store.objects.create(firm=firm, name="Acme Flagship", city="Berlin", country="DE")


@pytest.fixture
def second_store(firm):
    return Store.objects.create(firm=firm, name="Acme Online", city="Hamburg", country="DE")


@pytest.fixture
def other_store(other_firm):
    return Store.objects.create(firm=other_firm, name="Globex Outlet")


@pytest.fixture
def admin_user(roles, firm):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        name="Admin User",
        firm=firm,
        roles=[Role.ADMIN],
    )


@pytest.fixture
def manager_user(roles, firm):
    return User.objects.create_user(
        email="manager@test.com",
        password="testpass123",
        name="Manager User",
        firm=firm,
        roles=[Role.MANAGER],
    )


@pytest.fixture
def coordinator_user(roles, firm):
    return User.objects.create_user(
        email="coordinator@test.com",
        password="testpass123",
        name="Coordinator User",
        firm=firm,
        roles=[Role.COORDINATOR],
    )


@pytest.fixture
def outsider_manager(roles, other_firm):
    return User.objects.create_user(
        email="outsider@test.com",
        password="testpass123",
        name="Outsider",
        firm=other_firm,
        roles=[Role.MANAGER],
    )


@pytest.fixture
def influencer(db):
    return Influencer.objects.create(
        name="Lena Fit",
        email="lena@example.com",
        platform="Instagram",
        followers=48000,
    )


@pytest.fixture
def product(db):
    return Product.objects.create(
        name="Protein Bar Box",
        sku="TST-001",
        as_code="AS100001",
        category=Product.Category.FITNESS,
        price=Decimal("24.90"),
        stock=100,
    )


@pytest.fixture
def campaign(store):
    now = timezone.now()
    return Campaign.objects.create(
        store=store,
        name="Summer Launch",
        status=Campaign.Status.ACTIVE,
        type=Campaign.Type.MIXED,
        budget=Decimal("5000.00"),
        budget_spent=Decimal("2000.00"),
        budget_allocated=Decimal("3500.00"),
        start_date=now,
        end_date=now + timedelta(days=30),
    )


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def manager_client(manager_user):
    return _client_for(manager_user)


@pytest.fixture
def coordinator_client(coordinator_user):
    return _client_for(coordinator_user)


@pytest.fixture
def outsider_client(outsider_manager):
    return _client_for(outsider_manager)
