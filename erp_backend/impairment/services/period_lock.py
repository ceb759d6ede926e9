# impairment/services/period_lock.py

"""
======================================================
PATH: impairment/services/period_lock.py
======================================================
PERIOD LOCK MANAGER

Locks are keyed by (company, module, period_end); module is the
calculation type ("receivables", "assets", "inventory").

Design:
- No row == unlocked
- set_lock() is an upsert (race-safe on the unique key)
- No authorization here; callers enforce who may lock
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import IntegrityError, transaction

from impairment.models.period_lock import PeriodLock
from impairment.services.exceptions import PeriodLocked, ValidationFailure

logger = logging.getLogger(__name__)


def _module(module: str) -> str:
    module = (module or "").strip()
    if not module:
        raise ValidationFailure("module is required")
    return module


def get_lock(company, module: str, period_end: date) -> bool:
    return PeriodLock.objects.filter(
        company=company,
        module=_module(module),
        period_end=period_end,
        locked=True,
    ).exists()


def set_lock(company, module: str, period_end: date, locked: bool = True) -> PeriodLock:
    module = _module(module)
    try:
        with transaction.atomic():
            lock, _created = PeriodLock.objects.update_or_create(
                company=company,
                module=module,
                period_end=period_end,
                defaults={"locked": bool(locked)},
            )
    except IntegrityError:
        # Concurrent first write; the row exists now.
        lock = PeriodLock.objects.get(company=company, module=module, period_end=period_end)
        if lock.locked != bool(locked):
            lock.locked = bool(locked)
            lock.save(update_fields=["locked", "updated_at"])

    logger.info(
        "Period lock company=%s module=%s period_end=%s locked=%s",
        company.pk,
        module,
        period_end,
        lock.locked,
    )
    return lock


def assert_period_unlocked(company, module: str, period_end: date) -> None:
    """
    Raises:
        PeriodLocked if (company, module, period_end) is locked.
    """
    if get_lock(company, module, period_end):
        raise PeriodLocked(f"Period {period_end} is locked for {module}")
