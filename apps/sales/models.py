from decimal import Decimal

from django.db import models

from apps.accounts.models import SalesAgent
from apps.crm.models import Customer
from apps.products.models import Product

from .pricing import compute_sale_totals


class Sale(models.Model):
    PAYMENT_TYPE_CHOICES = [
        ("deposit", "Deposit"),
        ("cash", "Cash"),
        ("bank_transfer", "Bank transfer"),
        ("credit", "Credit"),
    ]
    PAYMENT_STATUS_CHOICES = [
        ("paid", "Paid"),
        ("pending", "Pending"),
    ]
    CHANNEL_CHOICES = [
        ("website", "Website"),
        ("whatsapp", "WhatsApp"),
        ("call", "Call"),
        ("in-person", "In person"),
    ]
    UPFRONT_PAYMENT_TYPES = ("deposit", "cash", "bank_transfer")

    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="sales")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="sales")
    sales_agent = models.ForeignKey(SalesAgent, on_delete=models.PROTECT, related_name="sales")
    quantity = models.DecimalField("Quantity", max_digits=10, decimal_places=2)
    price_per_unit = models.DecimalField("Price per unit", max_digits=10, decimal_places=2)
    subtotal = models.DecimalField("Subtotal", max_digits=12, decimal_places=2, default=0)
    tax_rate = models.DecimalField("Tax rate (%)", max_digits=5, decimal_places=2, default=0)
    tax_amount = models.DecimalField("Tax amount", max_digits=12, decimal_places=2, default=0)
    total_price = models.DecimalField("Total price", max_digits=12, decimal_places=2, default=0)
    payment_type = models.CharField("Payment type", max_length=20, choices=PAYMENT_TYPE_CHOICES)
    payment_status = models.CharField("Payment status", max_length=10, choices=PAYMENT_STATUS_CHOICES, default="pending")
    sales_channel = models.CharField("Sales channel", max_length=10, choices=CHANNEL_CHOICES)
    notes = models.TextField("Notes", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"

    def __str__(self):
        return f"Sale #{self.pk} - {self.total_price}"

    def recalculate_totals(self):
        totals = compute_sale_totals(self.quantity, self.price_per_unit, self.tax_rate).rounded()
        self.subtotal = totals.subtotal
        self.tax_amount = totals.tax_amount
        self.total_price = totals.total_price

    def save(self, *args, **kwargs):
        if self.tax_rate is None:
            self.tax_rate = Decimal("0")
        # Totals are derived from quantity, price and tax rate on every save.
        self.recalculate_totals()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"subtotal", "tax_amount", "total_price"}
        super().save(*args, **kwargs)
