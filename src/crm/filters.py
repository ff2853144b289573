import django_filters

from crm.models import ActivityRecord, SaleRecord


class ActivityRecordFilter(django_filters.FilterSet):
    """``start`` inclusive, ``end`` inclusive (dates as the seller sees them)."""

    start = django_filters.DateFilter(field_name="date", lookup_expr="gte", label="Desde")
    end = django_filters.DateFilter(field_name="date", lookup_expr="lte", label="Ate")
    user = django_filters.UUIDFilter(field_name="user_id", label="Vendedor")

    class Meta:
        model = ActivityRecord
        fields = ["start", "end", "user"]


class SaleRecordFilter(django_filters.FilterSet):
    start = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte", label="Desde")
    end = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte", label="Ate")
    user = django_filters.UUIDFilter(field_name="user_id", label="Vendedor")

    class Meta:
        model = SaleRecord
        fields = ["start", "end", "user", "status"]
