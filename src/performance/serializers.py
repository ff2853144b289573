"""DRF Serializers for the performance module."""
from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from performance.models import PeriodEvaluation
from performance.periods import GRANULARITIES, WEEK, parse_period
from performance.scoring import tier_info


# ────────────────────────────────────────────────────────────
# Query parameters
# ────────────────────────────────────────────────────────────

class EvolutionQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=30)
    granularity = serializers.ChoiceField(choices=GRANULARITIES, required=False, default=WEEK)
    user = serializers.UUIDField(required=False)

    def validate_days(self, value):
        allowed = list(settings.PERFORMANCE_LOOKBACK_DAYS)
        if value not in allowed:
            raise serializers.ValidationError(
                f"Periodo invalido. Opcoes: {', '.join(str(d) for d in allowed)}."
            )
        return value


class SummaryQuerySerializer(serializers.Serializer):
    period = serializers.CharField(required=False)
    user = serializers.UUIDField(required=False)

    def validate_period(self, value):
        try:
            parse_period(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))
        return value


class HistoryQuerySerializer(serializers.Serializer):
    user = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(required=False, default=12, min_value=1, max_value=60)


# ────────────────────────────────────────────────────────────
# Output
# ────────────────────────────────────────────────────────────

class TierSerializer(serializers.Serializer):
    tier = serializers.CharField()
    label = serializers.CharField()
    icon = serializers.CharField()
    phrase = serializers.CharField()
    min_percent = serializers.IntegerField()
    rank = serializers.IntegerField()


class ScorecardSerializer(serializers.Serializer):
    """Fields shared by the evolution and monthly summary payloads."""
    totals = serializers.DictField()
    conversion_rate = serializers.IntegerField()
    skipped_records = serializers.IntegerField()
    goal = serializers.DecimalField(max_digits=14, decimal_places=2)
    attainment = serializers.IntegerField()
    tier = TierSerializer(allow_null=True)
    phrase = serializers.CharField()
    risk_flag = serializers.CharField(allow_null=True)
    risk_flag_label = serializers.CharField(allow_null=True)
    consecutive_below = serializers.IntegerField()


class EvolutionWindowSerializer(serializers.Serializer):
    label = serializers.CharField()
    start = serializers.DateField()
    end = serializers.DateField()
    calls = serializers.IntegerField()
    messages = serializers.IntegerField()
    quotes_sent = serializers.IntegerField()
    quotes_closed = serializers.IntegerField()
    follow_ups = serializers.IntegerField()
    sales_count = serializers.IntegerField()
    approved_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    submitted_sales = serializers.IntegerField()


class EvolutionSerializer(ScorecardSerializer):
    range_start = serializers.DateField()
    range_end = serializers.DateField()
    granularity = serializers.CharField()
    windows = EvolutionWindowSerializer(many=True)


class MonthlySummarySerializer(ScorecardSerializer):
    period = serializers.CharField()


class PeriodEvaluationSerializer(serializers.ModelSerializer):
    tier_info = serializers.SerializerMethodField()
    risk_flag_label = serializers.SerializerMethodField()

    class Meta:
        model = PeriodEvaluation
        fields = [
            "id", "period", "approved_revenue", "revenue_goal", "sales_count",
            "submitted_sales", "counters", "attainment", "tier", "tier_info",
            "risk_flag", "risk_flag_label", "consecutive_below_before",
            "below_threshold", "is_final", "computed_at",
        ]
        read_only_fields = fields

    def get_tier_info(self, obj):
        info = tier_info(obj.tier)
        return info.as_dict() if info else None

    def get_risk_flag_label(self, obj):
        return obj.get_risk_flag_display() if obj.risk_flag else None
