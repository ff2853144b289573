from django.contrib import admin

from performance.models import PeriodEvaluation, UnderperformanceStreak


@admin.register(PeriodEvaluation)
class PeriodEvaluationAdmin(admin.ModelAdmin):
    list_display = ("user", "period", "attainment", "tier", "risk_flag", "is_final")
    list_filter = ("period", "tier", "risk_flag", "is_final")
    search_fields = ("user__email", "user__first_name", "user__last_name")
    readonly_fields = ("computed_at", "created_at", "updated_at")


@admin.register(UnderperformanceStreak)
class UnderperformanceStreakAdmin(admin.ModelAdmin):
    list_display = ("user", "consecutive_below", "last_period")
    search_fields = ("user__email",)
