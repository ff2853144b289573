from datetime import date
from decimal import Decimal

import pytest

from crm.models import ActivityRecord, SaleRecord
from performance.engine import PerformanceEngine


@pytest.mark.django_db
class TestActivityEndpoint:
    url = "/api/v1/activities/"

    def test_post_creates_then_overwrites(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        payload = {"date": "2025-03-05", "calls": 4, "quotes_sent": 2, "quotes_closed": 1}

        first = api_client.post(self.url, payload, format="json")
        second = api_client.post(self.url, {**payload, "calls": 9}, format="json")

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["calls"] == 9
        assert ActivityRecord.objects.filter(user=sales_user).count() == 1

    def test_rejects_more_closed_than_sent(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.post(
            self.url,
            {"date": "2025-03-05", "quotes_sent": 1, "quotes_closed": 2},
            format="json",
        )
        assert response.status_code == 400
        assert "quotes_closed" in response.json()

    def test_rejects_closed_month(self, api_client, sales_user):
        PerformanceEngine(sales_user.pk).close_period("2025-03")
        api_client.force_authenticate(sales_user)
        response = api_client.post(self.url, {"date": "2025-03-05", "calls": 1}, format="json")
        assert response.status_code == 400
        assert "date" in response.json()

    def test_list_is_scoped_to_the_seller(self, api_client, sales_user, other_sales_user, make_activity):
        make_activity(sales_user, date(2025, 3, 5), calls=1)
        make_activity(sales_user, date(2025, 3, 20), calls=2)
        make_activity(other_sales_user, date(2025, 3, 5), calls=3)
        api_client.force_authenticate(sales_user)

        response = api_client.get(self.url, {"start": "2025-03-01", "end": "2025-03-10"})

        assert response.status_code == 200
        assert [row["calls"] for row in response.json()["results"]] == [1]

    def test_manager_sees_every_seller(self, api_client, manager_user, sales_user, other_sales_user, make_activity):
        make_activity(sales_user, date(2025, 3, 5), calls=1)
        make_activity(other_sales_user, date(2025, 3, 5), calls=3)
        api_client.force_authenticate(manager_user)

        response = api_client.get(self.url, {"user": str(other_sales_user.pk)})

        assert [row["calls"] for row in response.json()["results"]] == [3]


@pytest.mark.django_db
class TestSaleEndpoint:
    url = "/api/v1/sales/"

    def test_seller_submits_sale_under_review(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.post(self.url, {"client_name": "ACME", "value": "1200.00"}, format="json")

        assert response.status_code == 201
        assert response.json()["status"] == "em_analise"
        assert SaleRecord.objects.get().user == sales_user

    def test_seller_cannot_submit_approved_sale(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        response = api_client.post(self.url, {"value": "10", "status": "aprovado"}, format="json")
        assert response.status_code == 400

    def test_only_reviewers_decide(self, api_client, sales_user, make_sale):
        sale = make_sale(sales_user, date(2025, 3, 5), "500", status=SaleRecord.Status.UNDER_REVIEW)
        api_client.force_authenticate(sales_user)
        response = api_client.post(f"{self.url}{sale.pk}/decide/", {"approved": True}, format="json")
        assert response.status_code == 403

    def test_manager_approves_then_second_decision_conflicts(
        self, api_client, manager_user, sales_user, make_sale, caplog
    ):
        sale = make_sale(sales_user, date(2025, 3, 5), None, status=SaleRecord.Status.PENDING)
        api_client.force_authenticate(manager_user)
        decide_url = f"{self.url}{sale.pk}/decide/"

        approved = api_client.post(decide_url, {"approved": True, "value": "2500.00"}, format="json")
        again = api_client.post(decide_url, {"approved": False}, format="json")

        assert approved.status_code == 200
        assert approved.json()["status"] == "aprovado"
        sale.refresh_from_db()
        assert sale.value == Decimal("2500.00")
        assert again.status_code == 409
        assert "decision rejected" in caplog.text

    def test_approval_without_value_is_400(self, api_client, admin_user, sales_user, make_sale):
        sale = make_sale(sales_user, date(2025, 3, 5), None, status=SaleRecord.Status.PENDING)
        api_client.force_authenticate(admin_user)
        response = api_client.post(f"{self.url}{sale.pk}/decide/", {"approved": True}, format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestGoalEndpoint:
    def test_manager_sets_goal(self, api_client, manager_user, sales_user):
        api_client.force_authenticate(manager_user)
        url = f"/api/v1/goals/{sales_user.pk}/"

        response = api_client.put(url, {"monthly_revenue_goal": "90000.00"}, format="json")

        assert response.status_code == 200
        assert api_client.get(url).json()["monthly_revenue_goal"] == "90000.00"

    def test_seller_reads_own_goal_but_cannot_change_it(self, api_client, sales_user):
        api_client.force_authenticate(sales_user)
        url = f"/api/v1/goals/{sales_user.pk}/"

        assert api_client.get(url).json()["monthly_revenue_goal"] == "75000.00"
        assert api_client.put(url, {"monthly_revenue_goal": "1"}, format="json").status_code == 403
