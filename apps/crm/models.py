from django.db import models

from apps.locations.models import City, Province, Town


class Customer(models.Model):
    TYPE_CHOICES = [
        ("B2B", "B2B"),
        ("B2C", "B2C"),
    ]

    full_name = models.CharField("Full name", max_length=100)
    customer_type = models.CharField("Customer type", max_length=3, choices=TYPE_CHOICES)
    business_name = models.CharField("Business name", max_length=100, blank=True)
    contact = models.CharField("Contact", max_length=20)
    whatsapp = models.CharField("WhatsApp", max_length=20, blank=True)
    email = models.EmailField("Email", blank=True)
    address = models.TextField("Address", blank=True)
    province = models.ForeignKey(Province, on_delete=models.PROTECT, related_name="customers")
    city = models.ForeignKey(City, on_delete=models.PROTECT, related_name="customers")
    town = models.ForeignKey(Town, on_delete=models.PROTECT, related_name="customers")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"

    def __str__(self):
        if self.business_name:
            return f"{self.full_name} ({self.business_name})"
        return self.full_name
