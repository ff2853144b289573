"""API views for activity records, sales and goals."""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, permissions, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from api.pagination import StandardResultsSetPagination
from api.permissions import IsAdminOrManager
from crm import services
from crm.filters import ActivityRecordFilter, SaleRecordFilter
from crm.models import ActivityRecord, SaleRecord
from crm.serializers import (
    ActivityRecordSerializer,
    GoalProfileSerializer,
    SaleDecisionSerializer,
    SaleRecordSerializer,
)

logger = logging.getLogger(__name__)


def _scope_to_user(request, qs):
    if getattr(request.user, "can_review_others", False):
        return qs
    return qs.filter(user=request.user)


class ActivityRecordViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    GET  /api/v1/activities/?start=&end=  own daily records (all sellers for reviewers)
    POST /api/v1/activities/              create or overwrite the counters of a day
    """
    serializer_class = ActivityRecordSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = ActivityRecordFilter
    ordering_fields = ["date"]
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return _scope_to_user(self.request, ActivityRecord.objects.select_related("user"))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        day = data.pop("date", None) or timezone.localdate()
        try:
            record, created = services.submit_daily_activity(request.user, day, **data)
        except ValueError as exc:
            raise serializers.ValidationError({"date": str(exc)})
        return Response(
            self.get_serializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class SaleRecordViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Sales submitted by sellers; reviewers approve or decline them."""
    serializer_class = SaleRecordSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = SaleRecordFilter
    ordering_fields = ["created_at", "value", "status"]
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return _scope_to_user(
            self.request,
            SaleRecord.objects.select_related("user", "decided_by"),
        )

    def perform_create(self, serializer):
        data = serializer.validated_data
        try:
            serializer.instance = services.create_sale(
                self.request.user,
                client_name=data.get("client_name", ""),
                value=data.get("value"),
                status=data.get("status", SaleRecord.Status.UNDER_REVIEW),
            )
        except ValueError as exc:
            raise serializers.ValidationError({"status": str(exc)})

    @action(
        detail=True,
        methods=["post"],
        permission_classes=[permissions.IsAuthenticated, IsAdminOrManager],
    )
    def decide(self, request, pk=None):
        """POST /api/v1/sales/<id>/decide/ {approved, value?, note?}"""
        sale = self.get_object()
        payload = SaleDecisionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        try:
            sale = services.decide_sale(
                sale,
                approved=data["approved"],
                value=data.get("value"),
                note=data.get("note", ""),
                actor=request.user,
            )
        except services.SaleAlreadyDecidedError as exc:
            logger.warning("Sale %s decision rejected for user=%s: %s", sale.pk, request.user.pk, exc)
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except ValueError as exc:
            raise serializers.ValidationError({"value": str(exc)})
        return Response(self.get_serializer(sale).data)


class GoalProfileView(APIView):
    """
    GET /api/v1/goals/<user_id>/  monthly revenue goal of a seller
    PUT /api/v1/goals/<user_id>/  set it (administrators and managers)
    """
    permission_classes = [permissions.IsAuthenticated]

    def _get_user(self, request, user_id):
        user = get_object_or_404(get_user_model(), pk=user_id)
        if user.pk != request.user.pk and not getattr(request.user, "can_review_others", False):
            raise PermissionDenied("Somente gestores podem consultar outros vendedores.")
        return user

    def get(self, request, user_id):
        user = self._get_user(request, user_id)
        goal = services.get_goal_profile(user.pk)["monthly_revenue_goal"]
        return Response({"user": user.pk, "monthly_revenue_goal": f"{goal:.2f}"})

    def put(self, request, user_id):
        if not IsAdminOrManager().has_permission(request, self):
            raise PermissionDenied(IsAdminOrManager.message)
        user = self._get_user(request, user_id)
        serializer = GoalProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = services.set_monthly_goal(user, serializer.validated_data["monthly_revenue_goal"])
        return Response(GoalProfileSerializer(profile).data)
