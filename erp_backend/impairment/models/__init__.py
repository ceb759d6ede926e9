# impairment/models/__init__.py

from impairment.models.calculation import ImpairmentCalculation, ImpairmentPosting
from impairment.models.period_lock import PeriodLock
from impairment.models.settings import ImpairmentSettings

__all__ = [
    "ImpairmentSettings",
    "ImpairmentCalculation",
    "ImpairmentPosting",
    "PeriodLock",
]
