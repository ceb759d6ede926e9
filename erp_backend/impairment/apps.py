# impairment/apps.py

from django.apps import AppConfig


class ImpairmentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "impairment"
    verbose_name = "Impairment & Write-downs"
