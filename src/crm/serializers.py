"""DRF Serializers for the CRM records."""
from __future__ import annotations

from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from crm.models import ActivityRecord, GoalProfile, SaleRecord


class ActivityRecordSerializer(serializers.ModelSerializer):
    date = serializers.DateField(required=False)

    class Meta:
        model = ActivityRecord
        fields = [
            "id", "user", "date", "calls", "messages", "quotes_sent",
            "quotes_closed", "follow_ups", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "user", "created_at", "updated_at"]
        # Uniqueness on (user, date) is an upsert, not a validation error.
        validators = []

    def validate_date(self, value):
        if value > timezone.localdate():
            raise serializers.ValidationError("Nao e possivel registrar atividades futuras.")
        return value

    def validate(self, attrs):
        if attrs.get("quotes_closed", 0) > attrs.get("quotes_sent", 0):
            raise serializers.ValidationError(
                {"quotes_closed": "Cotacoes fechadas nao podem exceder as enviadas."}
            )
        return attrs


class SaleRecordSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    status = serializers.ChoiceField(
        choices=SaleRecord.OPEN_STATUSES,
        required=False,
        default=SaleRecord.Status.UNDER_REVIEW,
    )

    class Meta:
        model = SaleRecord
        fields = [
            "id", "user", "client_name", "value", "status", "status_display",
            "created_at", "decided_at", "decided_by", "decision_note",
        ]
        read_only_fields = [
            "id", "user", "status_display", "created_at",
            "decided_at", "decided_by", "decision_note",
        ]


class SaleDecisionSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    value = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class GoalProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = GoalProfile
        fields = ["user", "monthly_revenue_goal", "updated_at"]
        read_only_fields = ["user", "updated_at"]
