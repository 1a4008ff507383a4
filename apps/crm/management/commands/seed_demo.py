from decimal import Decimal
from random import Random

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import SalesAgent, User
from apps.crm.models import Customer
from apps.locations.models import City, Province, Town
from apps.products.models import Product
from apps.sales.models import Sale

LOCATIONS = {
    "Punjab": {
        "Lahore": ["Walton Road", "Gulberg", "DHA"],
        "Gujranwala": ["Civil Lines"],
        "Faisalabad": ["Jaranwala Road"],
    },
    "KPK": {
        "Peshawar": ["University Town", "Hayatabad"],
        "Mardan": ["City Center"],
    },
}

PRODUCTS = [
    ("Flour 5kg Bag", "Premium", "bag", "5.00", "450.00"),
    ("Flour 10kg Bag", "Premium", "bag", "10.00", "850.00"),
    ("Flour 20kg Bag", "Premium", "bag", "20.00", "1650.00"),
    ("Flour 50kg Bag", "Wholesale", "bag", "50.00", "4000.00"),
    ("Flour Per KG", "Bulk", "kg", "1.00", "85.00"),
]

DEMO_AGENT_EMAIL = "agent@flourcrm.com"


def _ensure_count(model, target, factory):
    existing = model.objects.count()
    for idx in range(existing, target):
        factory(idx, existing)


class Command(BaseCommand):
    help = "Seed the admin account, locations, products and demo customers/sales. Safe to re-run."

    def add_arguments(self, parser):
        parser.add_argument("--customers", type=int, default=6)
        parser.add_argument("--sales", type=int, default=20)

    @transaction.atomic
    def handle(self, *args, **options):
        rng = Random(42)
        admin = self._admin()

        towns = []
        for province_name, cities in LOCATIONS.items():
            province, _ = Province.objects.get_or_create(name=province_name)
            for city_name, town_names in cities.items():
                city, _ = City.objects.get_or_create(province=province, name=city_name)
                for town_name in town_names:
                    town, _ = Town.objects.get_or_create(city=city, name=town_name)
                    towns.append(town)

        for name, category, unit, weight, price in PRODUCTS:
            Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "unit": unit,
                    "weight_per_unit": Decimal(weight),
                    "price_per_unit": Decimal(price),
                },
            )

        agent = self._agent()

        def make_customer(idx, offset):
            town = towns[idx % len(towns)]
            is_b2b = idx % 2 == 0
            Customer.objects.create(
                full_name=f"Customer {idx + 1}",
                customer_type="B2B" if is_b2b else "B2C",
                business_name=f"Bakery {idx + 1}" if is_b2b else "",
                contact=f"0300{idx + 1:07d}",
                province=town.city.province,
                city=town.city,
                town=town,
            )

        _ensure_count(Customer, options["customers"], make_customer)

        customers = list(Customer.objects.all())
        products = list(Product.objects.filter(is_active=True))
        payment_types = [code for code, _ in Sale.PAYMENT_TYPE_CHOICES]
        channels = [code for code, _ in Sale.CHANNEL_CHOICES]

        def make_sale(idx, offset):
            product = rng.choice(products)
            payment_type = rng.choice(payment_types)
            Sale.objects.create(
                customer=rng.choice(customers),
                product=product,
                sales_agent=agent,
                quantity=Decimal(rng.randint(1, 40)),
                price_per_unit=product.price_per_unit,
                tax_rate=Decimal("5") if idx % 3 == 0 else Decimal("0"),
                payment_type=payment_type,
                payment_status="pending" if payment_type == "credit" else "paid",
                sales_channel=rng.choice(channels),
            )

        _ensure_count(Sale, options["sales"], make_sale)

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded: admin {admin.email}, {Province.objects.count()} provinces, "
                f"{Product.objects.count()} products, {Customer.objects.count()} customers, "
                f"{Sale.objects.count()} sales."
            )
        )

    def _admin(self):
        email = settings.SEED_ADMIN_EMAIL
        admin = User.objects.filter(email__iexact=email).first()
        if admin is None:
            admin = User.objects.create_superuser(email=email, password=settings.SEED_ADMIN_PASSWORD, name="Admin User")
        return admin

    def _agent(self):
        user = User.objects.filter(email__iexact=DEMO_AGENT_EMAIL).first()
        if user is None:
            user = User.objects.create_user(
                email=DEMO_AGENT_EMAIL,
                password=settings.AGENT_TEMP_PASSWORD,
                name="Demo Agent",
                role=User.ROLE_AGENT,
                access_level="edit",
            )
        agent, _ = SalesAgent.objects.get_or_create(user=user, defaults={"commission_rate": Decimal("2.50")})
        return agent
