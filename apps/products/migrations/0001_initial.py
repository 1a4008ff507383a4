from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("category", models.CharField(blank=True, max_length=50, verbose_name="Category")),
                (
                    "target_customer",
                    models.CharField(
                        choices=[("B2B", "B2B"), ("B2C", "B2C"), ("Both", "Both")],
                        default="Both",
                        max_length=4,
                        verbose_name="Target customer",
                    ),
                ),
                (
                    "unit",
                    models.CharField(
                        choices=[("kg", "Kilogram"), ("bag", "Bag")],
                        default="kg",
                        max_length=3,
                        verbose_name="Unit",
                    ),
                ),
                ("weight_per_unit", models.DecimalField(decimal_places=2, default=1, max_digits=8, verbose_name="Weight per unit")),
                ("price_per_unit", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Price per unit")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ["name"],
            },
        ),
    ]
