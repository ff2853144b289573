from datetime import date

import pytest

from accounts.models import User
from performance.models import PeriodEvaluation
from performance.tasks import close_month_evaluations, close_seller_period


@pytest.mark.django_db
def test_close_month_evaluations_skips_other_days(sales_user, monkeypatch):
    queued = []
    monkeypatch.setattr(close_seller_period, "delay", lambda **kwargs: queued.append(kwargs))

    assert close_month_evaluations(today=date(2025, 4, 2)) == 0
    assert queued == []


@pytest.mark.django_db
def test_close_month_evaluations_queues_active_sellers_only(
    sales_user,
    other_sales_user,
    manager_user,
    monkeypatch,
):
    User.objects.create_user(email="inactive@test.com", password="x", is_active=False)
    queued = []
    monkeypatch.setattr(close_seller_period, "delay", lambda **kwargs: queued.append(kwargs))

    count = close_month_evaluations(today=date(2025, 1, 1))

    assert count == 2
    assert {q["user_id"] for q in queued} == {str(sales_user.pk), str(other_sales_user.pk)}
    assert {q["period"] for q in queued} == {"2024-12"}


@pytest.mark.django_db
def test_close_month_evaluations_keeps_going_when_dispatch_fails(
    sales_user,
    other_sales_user,
    monkeypatch,
):
    def flaky_delay(**kwargs):
        if kwargs["user_id"] == str(sales_user.pk):
            raise ConnectionError("broker down")

    monkeypatch.setattr(close_seller_period, "delay", flaky_delay)

    assert close_month_evaluations(today=date(2025, 3, 1)) == 1


@pytest.mark.django_db
def test_close_seller_period_runs_eagerly(sales_user, make_sale):
    make_sale(sales_user, date(2025, 2, 14), "80000")

    result = close_seller_period.delay(user_id=str(sales_user.pk), period="2025-02")

    evaluation = PeriodEvaluation.objects.get(user=sales_user, period="2025-02")
    assert result.get() == str(evaluation.pk)
    assert evaluation.tier == "ouro"
