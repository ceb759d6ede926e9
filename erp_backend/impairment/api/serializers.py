# impairment/api/serializers.py

"""
======================================================
PATH: impairment/api/serializers.py
======================================================
IMPAIRMENT API SERIALIZERS

Request envelope:
    {"action": "...", "period_end": "YYYY-MM-DD", "params": {...}}

Per-action params are validated by a dedicated serializer. Estimate
lists accept either a list of objects or a plain {id: amount} map, and
are normalized to {id(str): Decimal}.
"""

from decimal import Decimal

from rest_framework import serializers

from impairment.models.calculation import ImpairmentCalculation
from impairment.services.previews import CALC_TYPES

ACTION_PREVIEW_RECEIVABLES = "preview_receivables"
ACTION_POST_RECEIVABLES = "post_receivables"
ACTION_PREVIEW_ASSETS = "preview_assets"
ACTION_POST_ASSETS = "post_assets"
ACTION_PREVIEW_INVENTORY = "preview_inventory"
ACTION_POST_INVENTORY = "post_inventory"
ACTION_GET_SETTINGS = "get_settings"
ACTION_UPDATE_SETTINGS = "update_settings"
ACTION_GET_LOCK = "get_lock"
ACTION_SET_LOCK = "set_lock"

ACTIONS = [
    ACTION_PREVIEW_RECEIVABLES,
    ACTION_POST_RECEIVABLES,
    ACTION_PREVIEW_ASSETS,
    ACTION_POST_ASSETS,
    ACTION_PREVIEW_INVENTORY,
    ACTION_POST_INVENTORY,
    ACTION_GET_SETTINGS,
    ACTION_UPDATE_SETTINGS,
    ACTION_GET_LOCK,
    ACTION_SET_LOCK,
]


class ImpairmentRequestSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ACTIONS)
    # Required for every action, settings included.
    period_end = serializers.DateField()
    params = serializers.DictField(required=False, default=dict)


class _EstimateMapField(serializers.Field):
    """
    Accepts [{"<id_key>": ..., "<amount_key>": ...}, ...] or {id: amount}.
    """

    def __init__(self, id_key: str, amount_key: str, **kwargs):
        self.id_key = id_key
        self.amount_key = amount_key
        self.amount_field = serializers.DecimalField(
            max_digits=16, decimal_places=4, min_value=Decimal("0"), coerce_to_string=False
        )
        self.id_field = serializers.UUIDField()
        super().__init__(**kwargs)

    def _pair(self, raw_id, raw_amount):
        try:
            key = str(self.id_field.run_validation(raw_id))
            amount = self.amount_field.run_validation(raw_amount)
        except serializers.ValidationError as exc:
            detail = exc.detail[0] if isinstance(exc.detail, list) and exc.detail else exc.detail
            raise serializers.ValidationError(
                f"Invalid {self.id_key}/{self.amount_key}: {detail}"
            ) from exc
        return key, amount

    def to_internal_value(self, data):
        pairs = {}
        if isinstance(data, dict):
            for raw_id, raw_amount in data.items():
                key, amount = self._pair(raw_id, raw_amount)
                pairs[key] = amount
            return pairs

        if not isinstance(data, list):
            raise serializers.ValidationError("Expected a list or an object")

        for row in data:
            if not isinstance(row, dict) or self.id_key not in row or self.amount_key not in row:
                raise serializers.ValidationError(
                    f"Each entry needs {self.id_key} and {self.amount_key}"
                )
            key, amount = self._pair(row[self.id_key], row[self.amount_key])
            pairs[key] = amount
        return pairs

    def to_representation(self, value):
        return {k: str(v) for k, v in value.items()}


class AssetsParamsSerializer(serializers.Serializer):
    recoverables = _EstimateMapField(
        id_key="asset_id",
        amount_key="recoverable_amount",
        required=False,
        default=dict,
    )


class InventoryParamsSerializer(serializers.Serializer):
    nrv = _EstimateMapField(
        id_key="item_id",
        amount_key="nrv_per_unit",
        required=False,
        default=dict,
    )


def _rate_field():
    return serializers.DecimalField(
        max_digits=6,
        decimal_places=4,
        min_value=Decimal("0"),
        max_value=Decimal("1"),
        required=False,
        coerce_to_string=False,
    )


class UpdateSettingsParamsSerializer(serializers.Serializer):
    ecl_rate_0_30 = _rate_field()
    ecl_rate_31_60 = _rate_field()
    ecl_rate_61_90 = _rate_field()
    ecl_rate_90_plus = _rate_field()


class LockParamsSerializer(serializers.Serializer):
    module = serializers.ChoiceField(choices=list(CALC_TYPES))
    locked = serializers.BooleanField(required=False, default=True)


class ImpairmentCalculationSerializer(serializers.ModelSerializer):
    transaction_id = serializers.SerializerMethodField()
    total = serializers.SerializerMethodField()

    class Meta:
        model = ImpairmentCalculation
        fields = [
            "id",
            "calc_type",
            "period_end",
            "status",
            "total",
            "transaction_id",
            "params",
            "result",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields

    def get_transaction_id(self, obj):
        posting = getattr(obj, "posting", None)
        return str(posting.transaction_id) if posting else None

    def get_total(self, obj):
        summary = (obj.result or {}).get("summary") or {}
        for key in ("total_expected_loss", "total_impairment", "total_write_down"):
            if key in summary:
                return summary[key]
        return None
