from django.db import models


class Product(models.Model):
    UNIT_CHOICES = [
        ("kg", "Kilogram"),
        ("bag", "Bag"),
    ]
    TARGET_CHOICES = [
        ("B2B", "B2B"),
        ("B2C", "B2C"),
        ("Both", "Both"),
    ]

    name = models.CharField("Name", max_length=100)
    category = models.CharField("Category", max_length=50, blank=True)
    target_customer = models.CharField("Target customer", max_length=4, choices=TARGET_CHOICES, default="Both")
    unit = models.CharField("Unit", max_length=3, choices=UNIT_CHOICES, default="kg")
    weight_per_unit = models.DecimalField("Weight per unit", max_digits=8, decimal_places=2, default=1)
    price_per_unit = models.DecimalField("Price per unit", max_digits=10, decimal_places=2)
    is_active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"

    def __str__(self):
        return self.name
