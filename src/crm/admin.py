from django.contrib import admin

from crm.models import ActivityRecord, GoalProfile, SaleRecord


@admin.register(ActivityRecord)
class ActivityRecordAdmin(admin.ModelAdmin):
    list_display = ("user", "date", "calls", "messages", "quotes_sent", "quotes_closed", "follow_ups")
    list_filter = ("date",)
    search_fields = ("user__email",)
    date_hierarchy = "date"


@admin.register(SaleRecord)
class SaleRecordAdmin(admin.ModelAdmin):
    list_display = ("client_name", "user", "value", "status", "created_at", "decided_at")
    list_filter = ("status",)
    search_fields = ("client_name", "user__email")
    readonly_fields = ("decided_at", "decided_by")


@admin.register(GoalProfile)
class GoalProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "monthly_revenue_goal", "updated_at")
    search_fields = ("user__email",)
