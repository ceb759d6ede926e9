import decimal
import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FixedAsset",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("description", models.CharField(max_length=255)),
                ("purchase_date", models.DateField(blank=True, null=True)),
                ("cost", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=14)),
                (
                    "accumulated_depreciation",
                    models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=14),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("disposed", "Disposed")],
                        default="active",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fixed_assets",
                        to="users.company",
                    ),
                ),
            ],
            options={
                "ordering": ["description"],
            },
        ),
    ]
