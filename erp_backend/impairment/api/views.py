# PATH: impairment/api/views.py

"""
PATH: impairment/api/views.py

IMPAIRMENT API

POST /api/impairment/
    {"action": "...", "period_end": "YYYY-MM-DD", "params": {...}}

One endpoint, dispatched on `action`. Every failure is answered as
{"error": "<message>"} with the status carried by the exception:

    NotAuthenticated 401 | TenantNotFound 403 | ValidationFailure 400
    AlreadyPosted 409    | PeriodLocked 423   | AccountResolutionFailure 500
    PostingFailure 500

Money is always a 2-decimal string. A post with nothing to write down
answers 200 {"posted": false, "total": "0.00"}; a real post answers 201.

post_* actions never trust a client preview: the preview is recomputed
here with the company's current settings and the supplied params, then
handed to the posting engine.

GET /api/impairment/calculations/
    Posted calculation history for the caller's company.
    Filters: ?calc_type=, ?period_end=, ?period_end_from=, ?period_end_to=
"""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from impairment.api import serializers as api
from impairment.api.filters import ImpairmentCalculationFilter
from impairment.models.calculation import ImpairmentCalculation
from impairment.services import calculators, period_lock, posting_engine, settings_store
from impairment.services.exceptions import ImpairmentError, ValidationFailure
from impairment.services.previews import CALC_ASSETS, CALC_INVENTORY, CALC_RECEIVABLES
from impairment.services.tenant import resolve_company
from permissions.roles import (
    CAP_IMPAIRMENT_MANAGE,
    CAP_IMPAIRMENT_POST,
    CAP_IMPAIRMENT_VIEW,
    HasCapability,
    user_has_capability,
)

logger = logging.getLogger(__name__)

ACTION_CAPABILITIES = {
    api.ACTION_PREVIEW_RECEIVABLES: CAP_IMPAIRMENT_VIEW,
    api.ACTION_PREVIEW_ASSETS: CAP_IMPAIRMENT_VIEW,
    api.ACTION_PREVIEW_INVENTORY: CAP_IMPAIRMENT_VIEW,
    api.ACTION_GET_SETTINGS: CAP_IMPAIRMENT_VIEW,
    api.ACTION_GET_LOCK: CAP_IMPAIRMENT_VIEW,
    api.ACTION_POST_RECEIVABLES: CAP_IMPAIRMENT_POST,
    api.ACTION_POST_ASSETS: CAP_IMPAIRMENT_POST,
    api.ACTION_POST_INVENTORY: CAP_IMPAIRMENT_POST,
    api.ACTION_UPDATE_SETTINGS: CAP_IMPAIRMENT_MANAGE,
    api.ACTION_SET_LOCK: CAP_IMPAIRMENT_MANAGE,
}


def _first_error(detail) -> str:
    """Flatten DRF error detail into one readable message."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_error(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return "Invalid request"
    if isinstance(detail, list):
        return _first_error(detail[0]) if detail else "Invalid request"
    return str(detail)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise ValidationFailure(_first_error(serializer.errors))
    return serializer.validated_data


def _estimates_to_json(estimates: dict) -> dict:
    return {key: str(value) for key, value in estimates.items()}


class ErrorEnvelopeMixin:
    """Answer every failure as {"error": message}."""

    def handle_exception(self, exc):
        if isinstance(exc, ImpairmentError):
            if exc.status_code >= 500:
                logger.error("Impairment request failed: %s", exc.message)
            return Response({"error": exc.message}, status=exc.status_code)

        response = super().handle_exception(exc)
        if isinstance(exc, APIException):
            response.data = {"error": _first_error(exc.detail)}
        elif isinstance(response.data, dict) and "detail" in response.data:
            response.data = {"error": str(response.data["detail"])}
        return response


class ImpairmentActionView(ErrorEnvelopeMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = api.ImpairmentRequestSerializer

    @extend_schema(
        tags=["impairment"],
        description=(
            "Run one impairment action. Money values are 2-decimal strings; "
            "a zero-impact post returns 200 {\"posted\": false, \"total\": \"0.00\"}."
        ),
        request=api.ImpairmentRequestSerializer,
        responses={
            200: dict, 201: dict, 400: dict, 401: dict, 403: dict, 409: dict, 423: dict, 500: dict,
        },
    )
    def post(self, request, *args, **kwargs):
        company = resolve_company(request.user)
        data = _validated(api.ImpairmentRequestSerializer, request.data)

        action = data["action"]
        if not user_has_capability(request.user, ACTION_CAPABILITIES[action]):
            raise PermissionDenied(f"You do not have permission to {action.replace('_', ' ')}.")

        handler = getattr(self, f"_{action}")
        return handler(request, company, data.get("period_end"), data.get("params") or {})

    # ------------------------------------------------------------
    # previews
    # ------------------------------------------------------------

    def _preview_receivables(self, request, company, period_end, params):
        preview = calculators.preview_receivables(company, period_end)
        return Response(preview.to_dict())

    def _preview_assets(self, request, company, period_end, params):
        recoverables = _validated(api.AssetsParamsSerializer, params)["recoverables"]
        preview = calculators.preview_assets(company, period_end, recoverables)
        return Response(preview.to_dict())

    def _preview_inventory(self, request, company, period_end, params):
        nrv = _validated(api.InventoryParamsSerializer, params)["nrv"]
        preview = calculators.preview_inventory(company, period_end, nrv)
        return Response(preview.to_dict())

    # ------------------------------------------------------------
    # posts
    # ------------------------------------------------------------

    def _post(self, request, company, calc_type, period_end, estimates):
        preview = calculators.compute_preview(company, calc_type, period_end, estimates)
        result = posting_engine.post(
            company,
            calc_type,
            period_end,
            preview,
            user=request.user,
            params={key: _estimates_to_json(value) for key, value in estimates.items()},
        )
        code = status.HTTP_201_CREATED if result.posted else status.HTTP_200_OK
        return Response(result.to_dict(), status=code)

    def _post_receivables(self, request, company, period_end, params):
        return self._post(request, company, CALC_RECEIVABLES, period_end, {})

    def _post_assets(self, request, company, period_end, params):
        estimates = _validated(api.AssetsParamsSerializer, params)
        return self._post(request, company, CALC_ASSETS, period_end, dict(estimates))

    def _post_inventory(self, request, company, period_end, params):
        estimates = _validated(api.InventoryParamsSerializer, params)
        return self._post(request, company, CALC_INVENTORY, period_end, dict(estimates))

    # ------------------------------------------------------------
    # settings
    # ------------------------------------------------------------

    def _get_settings(self, request, company, period_end, params):
        obj = settings_store.get_settings(company)
        return Response(settings_store.settings_to_dict(obj))

    def _update_settings(self, request, company, period_end, params):
        rates = _validated(api.UpdateSettingsParamsSerializer, params)
        obj = settings_store.update_settings(company, **rates)
        return Response(settings_store.settings_to_dict(obj))

    # ------------------------------------------------------------
    # period locks
    # ------------------------------------------------------------

    def _get_lock(self, request, company, period_end, params):
        module = _validated(api.LockParamsSerializer, params)["module"]
        locked = period_lock.get_lock(company, module, period_end)
        return Response(
            {"module": module, "period_end": period_end.isoformat(), "locked": locked}
        )

    def _set_lock(self, request, company, period_end, params):
        data = _validated(api.LockParamsSerializer, params)
        lock = period_lock.set_lock(company, data["module"], period_end, data["locked"])
        return Response(
            {
                "module": lock.module,
                "period_end": lock.period_end.isoformat(),
                "locked": lock.locked,
            }
        )


@extend_schema(tags=["impairment"])
class ImpairmentCalculationListView(ErrorEnvelopeMixin, ListAPIView):
    """
    Read-only history of posted calculations (caller's company only).
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_IMPAIRMENT_VIEW
    serializer_class = api.ImpairmentCalculationSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = ImpairmentCalculationFilter

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return ImpairmentCalculation.objects.none()
        company = resolve_company(self.request.user)
        return (
            ImpairmentCalculation.objects.filter(company=company)
            .select_related("posting")
            .order_by("-period_end", "-created_at")
        )
