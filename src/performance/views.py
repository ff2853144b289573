"""API views for the performance module."""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import permissions
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from performance.engine import PerformanceEngine
from performance.periods import lookback_range, period_key
from performance.scoring import TIER_TABLE
from performance.serializers import (
    EvolutionQuerySerializer,
    EvolutionSerializer,
    HistoryQuerySerializer,
    MonthlySummarySerializer,
    PeriodEvaluationSerializer,
    SummaryQuerySerializer,
    TierSerializer,
)


def _target_user(request, user_id):
    """The seller being looked at: the requester, or ``user_id`` for reviewers."""
    if user_id is None or user_id == request.user.pk:
        return request.user
    if not getattr(request.user, "can_review_others", False):
        raise PermissionDenied("Somente gestores podem consultar outros vendedores.")
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound("Vendedor nao encontrado.")
    return user


# ────────────────────────────────────────────────────────────
# Evolution
# ────────────────────────────────────────────────────────────

class EvolutionView(APIView):
    """
    GET /api/v1/performance/evolution/?days=30|60|90&granularity=week|month
    Activity and revenue series of the last N days plus the scorecard.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = EvolutionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        user = _target_user(request, params.get("user"))
        range_start, range_end = lookback_range(timezone.localdate(), params["days"])
        data = PerformanceEngine(user_id=user.pk).evolution(
            range_start,
            range_end,
            granularity=params["granularity"],
        )
        return Response(EvolutionSerializer(data).data)


# ────────────────────────────────────────────────────────────
# Monthly summary
# ────────────────────────────────────────────────────────────

class MonthlySummaryView(APIView):
    """
    GET /api/v1/performance/summary/?period=YYYY-MM
    Attainment, tier and risk flag of one month (current month by default).
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = SummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        user = _target_user(request, params.get("user"))
        period = params.get("period") or period_key(timezone.localdate())
        data = PerformanceEngine(user_id=user.pk).monthly_summary(period)
        return Response(MonthlySummarySerializer(data).data)


# ────────────────────────────────────────────────────────────
# History of closed months
# ────────────────────────────────────────────────────────────

class EvaluationHistoryView(APIView):
    """GET /api/v1/performance/history/ : closed months, most recent first."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        user = _target_user(request, params.get("user"))
        evaluations = PerformanceEngine(user_id=user.pk).history(limit=params["limit"])
        return Response(PeriodEvaluationSerializer(evaluations, many=True).data)


class TierTableView(APIView):
    """GET /api/v1/performance/tiers/"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(TierSerializer([info.as_dict() for info in TIER_TABLE], many=True).data)
