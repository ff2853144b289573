from datetime import date, timedelta

import pytest
from django.utils import timezone

from performance.engine import PerformanceEngine
from performance.scoring import TIER_TABLE


@pytest.mark.django_db
class TestEvolutionEndpoint:
    url = "/api/v1/performance/evolution/"

    def test_requires_authentication(self, api_client):
        assert api_client.get(self.url).status_code in (401, 403)

    def test_default_is_last_30_days_by_week(self, api_client, sales_user, make_activity, make_sale):
        today = timezone.localdate()
        make_activity(sales_user, today - timedelta(days=1), calls=5, quotes_sent=4, quotes_closed=1)
        make_sale(sales_user, today - timedelta(days=1), "1000")
        api_client.force_authenticate(sales_user)

        response = api_client.get(self.url)

        assert response.status_code == 200
        body = response.json()
        assert body["granularity"] == "week"
        assert body["totals"]["calls"] == 5
        assert body["conversion_rate"] == 25
        assert body["goal"] == "75000.00"
        assert body["risk_flag"] == "amarelo"
        assert body["tier"] is None
        assert body["phrase"] == "Foco total! Cada esforço conta."
        assert all(len(w["label"]) == 5 for w in body["windows"])
        assert date.fromisoformat(body["range_start"]).weekday() == 0

    def test_monthly_granularity(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.get(self.url, {"days": 90, "granularity": "month"})
        assert response.status_code == 200
        assert 3 <= len(response.json()["windows"]) <= 4

    @pytest.mark.parametrize("params", [{"days": 45}, {"granularity": "year"}, {"days": "abc"}])
    def test_rejects_invalid_query(self, api_client, sales_user, params):
        api_client.force_authenticate(sales_user)
        assert api_client.get(self.url, params).status_code == 400

    def test_seller_cannot_look_at_another_seller(self, api_client, sales_user, other_sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.get(self.url, {"user": str(other_sales_user.pk)})
        assert response.status_code == 403

    def test_manager_can_look_at_a_seller(self, api_client, manager_user, sales_user, make_activity):
        make_activity(sales_user, timezone.localdate() - timedelta(days=2), calls=7)
        api_client.force_authenticate(manager_user)

        response = api_client.get(self.url, {"user": str(sales_user.pk)})

        assert response.status_code == 200
        assert response.json()["totals"]["calls"] == 7

    def test_unknown_user_is_404(self, api_client, manager_user):
        api_client.force_authenticate(manager_user)
        response = api_client.get(self.url, {"user": "00000000-0000-0000-0000-000000000000"})
        assert response.status_code == 404


@pytest.mark.django_db
class TestSummaryEndpoint:
    url = "/api/v1/performance/summary/"

    def test_summary_of_a_month(self, api_client, sales_user, make_sale):
        make_sale(sales_user, date(2025, 3, 10), "84500")
        api_client.force_authenticate(sales_user)

        response = api_client.get(self.url, {"period": "2025-03"})

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "2025-03"
        assert body["attainment"] == 113
        assert body["tier"]["tier"] == "ouro"
        assert body["tier"]["icon"] == "🥇"
        assert body["risk_flag"] is None

    def test_invalid_period(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.get(self.url, {"period": "03/2025"})
        assert response.status_code == 400
        assert "period" in response.json()


@pytest.mark.django_db
class TestHistoryEndpoint:
    url = "/api/v1/performance/history/"

    def test_lists_closed_months(self, api_client, sales_user, make_sale):
        make_sale(sales_user, date(2025, 1, 10), "1000")
        PerformanceEngine(sales_user.pk).close_period("2025-02")
        api_client.force_authenticate(sales_user)

        response = api_client.get(self.url)

        assert response.status_code == 200
        body = response.json()
        assert [item["period"] for item in body] == ["2025-02", "2025-01"]
        assert body[0]["risk_flag"] == "amarelo"
        assert body[0]["risk_flag_label"] == "Atenção"
        assert body[0]["consecutive_below_before"] == 1
        assert body[0]["tier_info"] is None


@pytest.mark.django_db
def test_tier_table_endpoint(api_client, sales_user):
    api_client.force_authenticate(sales_user)
    response = api_client.get("/api/v1/performance/tiers/")
    assert response.status_code == 200
    assert [row["min_percent"] for row in response.json()] == [info.min_percent for info in TIER_TABLE]


@pytest.mark.django_db
@pytest.mark.parametrize("period", ["9999-12", "0001-01"])
def test_summary_rejects_periods_at_the_calendar_edges(api_client, sales_user, period):
    api_client.force_authenticate(sales_user)
    response = api_client.get("/api/v1/performance/summary/", {"period": period})
    assert response.status_code == 400
    assert "period" in response.json()
