# impairment/models/period_lock.py

from django.db import models

from users.models.company import Company


class PeriodLock(models.Model):
    """
    Administrator-controlled lock on (company, module, period_end).

    A missing row means "unlocked".
    """

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="period_locks",
    )

    module = models.CharField(max_length=50)
    period_end = models.DateField()
    locked = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-period_end", "module"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "module", "period_end"],
                name="uniq_period_lock_company_module_period",
            ),
        ]

    def __str__(self):
        state = "locked" if self.locked else "unlocked"
        return f"{self.module} {self.period_end} ({state})"
