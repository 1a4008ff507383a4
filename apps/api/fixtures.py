"""Object factories shared by the app test suites."""
from decimal import Decimal

from apps.accounts.models import SalesAgent, User
from apps.crm.models import Customer
from apps.locations.models import City, Province, Town
from apps.products.models import Product
from apps.sales.models import Sale

PASSWORD = "secret123"


def make_user(email="user@example.com", role=User.ROLE_AGENT, name="Test User", **extra):
    return User.objects.create_user(email=email, password=PASSWORD, name=name, role=role, **extra)


def make_admin(email="admin@example.com"):
    return make_user(email=email, role=User.ROLE_ADMIN, name="Admin")


def make_agent(email="agent@example.com", access_level=None, permissions=None, **extra):
    user = make_user(
        email=email,
        role=User.ROLE_AGENT,
        name=extra.pop("name", "Agent Smith"),
        access_level=access_level,
        permissions=permissions or {},
    )
    return SalesAgent.objects.create(user=user, **extra)


def make_location(province="Punjab", city="Lahore", town="Gulberg"):
    province_obj, _ = Province.objects.get_or_create(name=province)
    city_obj, _ = City.objects.get_or_create(province=province_obj, name=city)
    town_obj, _ = Town.objects.get_or_create(city=city_obj, name=town)
    return province_obj, city_obj, town_obj


def make_customer(full_name="Ali Khan", customer_type="B2C", location=None, **extra):
    province, city, town = location or make_location()
    if customer_type == "B2B":
        extra.setdefault("business_name", "Khan Bakery")
    return Customer.objects.create(
        full_name=full_name,
        customer_type=customer_type,
        contact=extra.pop("contact", "03001234567"),
        province=province,
        city=city,
        town=town,
        **extra,
    )


def make_product(name="Flour 10kg Bag", price="850.00", **extra):
    extra.setdefault("unit", "bag")
    extra.setdefault("weight_per_unit", Decimal("10"))
    return Product.objects.create(name=name, price_per_unit=Decimal(price), **extra)


def make_sale(customer, product, agent, quantity="1", price=None, created_at=None, **extra):
    extra.setdefault("payment_type", "cash")
    extra.setdefault("payment_status", "paid")
    extra.setdefault("sales_channel", "in-person")
    sale = Sale.objects.create(
        customer=customer,
        product=product,
        sales_agent=agent,
        quantity=Decimal(quantity),
        price_per_unit=Decimal(price) if price is not None else product.price_per_unit,
        **extra,
    )
    if created_at is not None:
        # created_at is auto_now_add; backdate through the queryset.
        Sale.objects.filter(pk=sale.pk).update(created_at=created_at)
        sale.refresh_from_db()
    return sale
