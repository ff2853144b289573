"""Main API URL router for /api/v1/."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from crm import views as crm_views
from performance import views as performance_views

router = DefaultRouter()
router.register(r"activities", crm_views.ActivityRecordViewSet, basename="activity")
router.register(r"sales", crm_views.SaleRecordViewSet, basename="sale")

urlpatterns = [
    path("", include(router.urls)),
    path("goals/<uuid:user_id>/", crm_views.GoalProfileView.as_view(), name="goal-profile"),
    # Performance
    path(
        "performance/evolution/",
        performance_views.EvolutionView.as_view(),
        name="performance-evolution",
    ),
    path(
        "performance/summary/",
        performance_views.MonthlySummaryView.as_view(),
        name="performance-summary",
    ),
    path(
        "performance/history/",
        performance_views.EvaluationHistoryView.as_view(),
        name="performance-history",
    ),
    path(
        "performance/tiers/",
        performance_views.TierTableView.as_view(),
        name="performance-tiers",
    ),
]
