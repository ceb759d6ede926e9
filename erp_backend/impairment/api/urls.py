# impairment/api/urls.py

from django.urls import path

from impairment.api.views import ImpairmentActionView, ImpairmentCalculationListView

urlpatterns = [
    path("", ImpairmentActionView.as_view(), name="impairment-action"),
    path(
        "calculations/",
        ImpairmentCalculationListView.as_view(),
        name="impairment-calculations",
    ),
]
