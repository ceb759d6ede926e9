import decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _rate(default):
    return models.DecimalField(
        decimal_places=4,
        default=decimal.Decimal(default),
        max_digits=6,
        validators=[
            django.core.validators.MinValueValidator(decimal.Decimal("0")),
            django.core.validators.MaxValueValidator(decimal.Decimal("1")),
        ],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ImpairmentSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ecl_rate_0_30", _rate("0.0100")),
                ("ecl_rate_31_60", _rate("0.0500")),
                ("ecl_rate_61_90", _rate("0.2000")),
                ("ecl_rate_90_plus", _rate("0.5000")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="impairment_settings",
                        to="users.company",
                    ),
                ),
            ],
            options={
                "verbose_name": "Impairment Settings",
                "verbose_name_plural": "Impairment Settings",
            },
        ),
        migrations.CreateModel(
            name="PeriodLock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("module", models.CharField(max_length=50)),
                ("period_end", models.DateField()),
                ("locked", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="period_locks",
                        to="users.company",
                    ),
                ),
            ],
            options={
                "ordering": ["-period_end", "module"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("company", "module", "period_end"),
                        name="uniq_period_lock_company_module_period",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ImpairmentCalculation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "calc_type",
                    models.CharField(
                        choices=[
                            ("receivables", "Receivables ECL"),
                            ("assets", "Asset impairment"),
                            ("inventory", "Inventory write-down"),
                        ],
                        max_length=20,
                    ),
                ),
                ("period_end", models.DateField()),
                ("params", models.JSONField(blank=True, default=dict)),
                ("result", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(choices=[("posted", "Posted")], default="posted", max_length=10),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="impairment_calculations",
                        to="users.company",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="impairment_calculations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-period_end", "-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "posted")),
                        fields=("company", "calc_type", "period_end"),
                        name="uniq_posted_impairment_per_period",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ImpairmentPosting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("posted_at", models.DateTimeField(auto_now_add=True)),
                (
                    "calculation",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="posting",
                        to="impairment.impairmentcalculation",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="impairment_postings",
                        to="users.company",
                    ),
                ),
                (
                    "posted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="impairment_postings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "transaction",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="impairment_posting",
                        to="accounting.transaction",
                    ),
                ),
            ],
            options={
                "ordering": ["-posted_at"],
            },
        ),
    ]
