# impairment/api/filters.py

import django_filters

from impairment.models.calculation import ImpairmentCalculation


class ImpairmentCalculationFilter(django_filters.FilterSet):
    calc_type = django_filters.ChoiceFilter(choices=ImpairmentCalculation.CALC_TYPES)
    period_end = django_filters.DateFilter()
    period_end_from = django_filters.DateFilter(field_name="period_end", lookup_expr="gte")
    period_end_to = django_filters.DateFilter(field_name="period_end", lookup_expr="lte")

    class Meta:
        model = ImpairmentCalculation
        fields = ["calc_type", "period_end"]
