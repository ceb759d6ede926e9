# impairment/services/settings_store.py

"""
IMPAIRMENT SETTINGS STORE

- get_settings(): lazily creates the company's row from
  settings.IMPAIRMENT_DEFAULT_ECL_RATES (race-safe)
- update_settings(): upsert; only the rates supplied change
- rate_for_bucket(): bucket key -> Decimal rate
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import IntegrityError, transaction

from impairment.models.settings import ImpairmentSettings
from impairment.services.exceptions import ValidationFailure
from impairment.services.previews import BUCKETS

logger = logging.getLogger(__name__)

BUCKET_FIELDS = {
    "0_30": "ecl_rate_0_30",
    "31_60": "ecl_rate_31_60",
    "61_90": "ecl_rate_61_90",
    "90_plus": "ecl_rate_90_plus",
}

RATE_FIELDS = tuple(BUCKET_FIELDS[b] for b in BUCKETS)

RATE_PLACES = Decimal("0.0001")


def _parse_rate(name: str, value) -> Decimal:
    if value is None or value == "":
        raise ValidationFailure(f"{name} is required")
    if isinstance(value, bool):
        raise ValidationFailure(f"{name} must be a number")
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationFailure(f"{name} must be a number") from exc

    if not rate.is_finite() or rate < 0 or rate > 1:
        raise ValidationFailure(f"{name} must be between 0 and 1")

    return rate.quantize(RATE_PLACES)


def default_rates() -> dict[str, Decimal]:
    configured = getattr(settings, "IMPAIRMENT_DEFAULT_ECL_RATES", {}) or {}
    fallback = {"0_30": "0.01", "31_60": "0.05", "61_90": "0.20", "90_plus": "0.50"}
    return {
        BUCKET_FIELDS[bucket]: _parse_rate(
            BUCKET_FIELDS[bucket], configured.get(bucket, fallback[bucket])
        )
        for bucket in BUCKETS
    }


def get_settings(company) -> ImpairmentSettings:
    existing = ImpairmentSettings.objects.filter(company=company).first()
    if existing is not None:
        return existing

    try:
        with transaction.atomic():
            created = ImpairmentSettings.objects.create(company=company, **default_rates())
    except IntegrityError:
        # Another request created the row first.
        return ImpairmentSettings.objects.get(company=company)

    logger.info("Created default impairment settings company=%s", company.pk)
    return created


@transaction.atomic
def update_settings(company, **rates) -> ImpairmentSettings:
    unknown = set(rates) - set(RATE_FIELDS)
    if unknown:
        raise ValidationFailure(f"Unknown settings field(s): {', '.join(sorted(unknown))}")

    parsed = {name: _parse_rate(name, value) for name, value in rates.items()}

    get_settings(company)
    obj = ImpairmentSettings.objects.select_for_update().get(company=company)

    if not parsed:
        return obj

    for name, value in parsed.items():
        setattr(obj, name, value)
    obj.save(update_fields=[*parsed.keys(), "updated_at"])

    logger.info(
        "Updated impairment settings company=%s fields=%s",
        company.pk,
        ",".join(sorted(parsed)),
    )
    return obj


def rate_for_bucket(settings_obj: ImpairmentSettings, bucket: str) -> Decimal:
    try:
        return getattr(settings_obj, BUCKET_FIELDS[bucket])
    except KeyError as exc:
        raise ValidationFailure(f"Unknown aging bucket: {bucket!r}") from exc


def settings_to_dict(settings_obj: ImpairmentSettings) -> dict:
    return {name: str(getattr(settings_obj, name)) for name in RATE_FIELDS}
