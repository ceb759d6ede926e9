# impairment/models/settings.py

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from users.models.company import Company

RATE_VALIDATORS = [
    MinValueValidator(Decimal("0")),
    MaxValueValidator(Decimal("1")),
]


def _rate_field(default: str):
    return models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=Decimal(default),
        validators=RATE_VALIDATORS,
    )


class ImpairmentSettings(models.Model):
    """
    Per-company ECL rates by aging bucket (fractions in [0, 1]).

    Mutable. Changes only affect previews computed afterwards;
    posted calculations keep the rates embedded in their snapshot.
    """

    company = models.OneToOneField(
        Company,
        on_delete=models.CASCADE,
        related_name="impairment_settings",
    )

    ecl_rate_0_30 = _rate_field("0.0100")
    ecl_rate_31_60 = _rate_field("0.0500")
    ecl_rate_61_90 = _rate_field("0.2000")
    ecl_rate_90_plus = _rate_field("0.5000")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Impairment Settings"
        verbose_name_plural = "Impairment Settings"

    def __str__(self):
        return f"Impairment settings – {self.company}"

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)
