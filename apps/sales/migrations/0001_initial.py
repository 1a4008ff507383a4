import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("crm", "0001_initial"),
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Quantity")),
                ("price_per_unit", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Price per unit")),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Subtotal")),
                ("tax_rate", models.DecimalField(decimal_places=2, default=0, max_digits=5, verbose_name="Tax rate (%)")),
                ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Tax amount")),
                ("total_price", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Total price")),
                (
                    "payment_type",
                    models.CharField(
                        choices=[
                            ("deposit", "Deposit"),
                            ("cash", "Cash"),
                            ("bank_transfer", "Bank transfer"),
                            ("credit", "Credit"),
                        ],
                        max_length=20,
                        verbose_name="Payment type",
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("paid", "Paid"), ("pending", "Pending")],
                        default="pending",
                        max_length=10,
                        verbose_name="Payment status",
                    ),
                ),
                (
                    "sales_channel",
                    models.CharField(
                        choices=[
                            ("website", "Website"),
                            ("whatsapp", "WhatsApp"),
                            ("call", "Call"),
                            ("in-person", "In person"),
                        ],
                        max_length=10,
                        verbose_name="Sales channel",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="crm.customer",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="products.product",
                    ),
                ),
                (
                    "sales_agent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="accounts.salesagent",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
