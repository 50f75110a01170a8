"""Seed database with demo data for development."""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone


class Command(BaseCommand):
    help = "Seed database with a demo firm, stores, roles, users, influencers, products and a campaign"

    DEMO_USERS = [
        {"email": "admin@crm.local", "name": "Ada Admin", "roles": ["ADMIN"], "password": "admin123!"},
        {"email": "manager@crm.local", "name": "Mona Manager", "roles": ["MANAGER"], "password": "manager123!"},
        {"email": "coordinator@crm.local", "name": "Cory Coordinator", "roles": ["COORDINATOR"], "password": "coord123!"},
    ]

    DEMO_INFLUENCERS = [
        {"name": "Lena Fit", "email": "lena.fit@example.com", "platform": "Instagram", "followers": 48000, "status": "ACTIVE"},
        {"name": "Marco Eats", "email": "marco.eats@example.com", "platform": "TikTok", "followers": 120000, "status": "COLD"},
        {"name": "Sara Style", "email": "sara.style@example.com", "platform": "Instagram", "followers": 310000, "status": "FINAL"},
    ]

    DEMO_PRODUCTS = [
        {"name": "Protein Bar Box", "sku": "DEMO-FIT-001", "as_code": "AS100001", "category": "FITNESS", "price": "24.90", "stock": 200},
        {"name": "Linen Summer Shirt", "sku": "DEMO-FSH-001", "as_code": "AS200001", "category": "FASHION", "price": "59.00", "stock": 80},
        {"name": "Hydrating Serum", "sku": "DEMO-BTY-001", "as_code": "AS300001", "category": "BEAUTY", "price": "35.50", "stock": 150},
    ]

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-passwords",
            action="store_true",
            help="Reset demo users passwords to default values.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding data...")
        roles = self._create_roles()
        firm = self._create_firm()
        stores = self._create_stores(firm)
        users = self._create_users(firm, reset_passwords=options["reset_passwords"])
        influencers = self._create_influencers()
        products = self._create_products()
        campaign = self._create_campaign(stores[0], influencers, products)

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {len(roles)} roles, 1 firm, {len(stores)} stores, {len(users)} users, "
            f"{len(influencers)} influencers, {len(products)} products, campaign '{campaign.name}'"
        ))

    def _create_roles(self):
        from accounts.services import ensure_default_roles
        return ensure_default_roles()

    def _create_firm(self):
        from stores.models import Firm
        firm, created = Firm.objects.get_or_create(
            name="Demo Brands Inc.",
            defaults={"email": "hello@demobrands.example", "city": "Berlin"},
        )
        if created:
            self.stdout.write(f"  Firm: {firm.name}")
        return firm

    def _create_stores(self, firm):
        from stores.models import Store
        stores = []
        for name, city in [("Flagship Store", "Berlin"), ("Online Shop", "Hamburg")]:
            store, created = Store.objects.get_or_create(
                firm=firm, name=name, defaults={"city": city, "country": "DE"},
            )
            if created:
                self.stdout.write(f"  Store: {store.name}")
            stores.append(store)
        return stores

    def _create_users(self, firm, *, reset_passwords: bool = False):
        from accounts.models import User

        users = []
        for ud in self.DEMO_USERS:
            is_admin = "ADMIN" in ud["roles"]
            user, created = User.objects.get_or_create(
                email=ud["email"],
                defaults={"name": ud["name"], "firm": firm, "is_staff": is_admin, "is_superuser": is_admin},
            )
            if created or reset_passwords:
                user.set_password(ud["password"])
                user.save(update_fields=["password"])
            user.set_roles(ud["roles"])
            if created:
                self.stdout.write(f"  User: {user.email} ({', '.join(ud['roles'])})")
            users.append(user)
        return users

    def _create_influencers(self):
        from influencers.models import Influencer
        influencers = []
        for data in self.DEMO_INFLUENCERS:
            influencer, _ = Influencer.objects.get_or_create(email=data["email"], defaults=data)
            influencers.append(influencer)
        return influencers

    def _create_products(self):
        from catalog.models import Product
        products = []
        for data in self.DEMO_PRODUCTS:
            defaults = {**data, "price": Decimal(data["price"])}
            product, _ = Product.objects.get_or_create(sku=data["sku"], defaults=defaults)
            products.append(product)
        return products

    def _create_campaign(self, store, influencers, products):
        from campaigns.models import Campaign
        from campaigns.services import assign_influencer, link_product

        now = timezone.now()
        campaign, created = Campaign.objects.get_or_create(
            store=store,
            name="Summer Launch",
            defaults={
                "description": "Demo campaign for the summer collection",
                "status": Campaign.Status.ACTIVE,
                "type": Campaign.Type.MIXED,
                "budget": Decimal("5000.00"),
                "budget_spent": Decimal("2000.00"),
                "budget_allocated": Decimal("3500.00"),
                "start_date": now,
                "end_date": now + timedelta(days=30),
                "reels_required": 2,
                "posts_required": 3,
                "stories_required": 5,
            },
        )
        if created:
            for influencer in influencers[:2]:
                assign_influencer(campaign.pk, influencer.pk, rate=Decimal("750.00"))
            link_product(campaign.pk, products[0].pk, quantity=10)
            self.stdout.write(f"  Campaign: {campaign.name}")
        return campaign
