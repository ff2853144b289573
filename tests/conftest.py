"""Shared fixtures for all tests."""
from datetime import datetime
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from crm.models import ActivityRecord, SaleRecord


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def manager_user(db):
    return User.objects.create_user(
        email="manager@test.com",
        password="testpass123",
        first_name="Manager",
        last_name="User",
        role=User.Role.MANAGER,
    )


@pytest.fixture
def sales_user(db):
    return User.objects.create_user(
        email="sales@test.com",
        password="testpass123",
        first_name="Sales",
        last_name="User",
        role=User.Role.SALES,
    )


@pytest.fixture
def other_sales_user(db):
    return User.objects.create_user(
        email="sales2@test.com",
        password="testpass123",
        first_name="Outro",
        last_name="Vendedor",
        role=User.Role.SALES,
    )


@pytest.fixture
def make_activity(db):
    def _make(user, day, **counters):
        return ActivityRecord.objects.create(user=user, date=day, **counters)
    return _make


@pytest.fixture
def make_sale(db):
    """Sale created at noon (local time) of ``day``."""
    def _make(user, day, value, status=SaleRecord.Status.APPROVED, client_name="Cliente"):
        return SaleRecord.objects.create(
            user=user,
            client_name=client_name,
            value=Decimal(str(value)) if value is not None else None,
            status=status,
            created_at=timezone.make_aware(datetime(day.year, day.month, day.day, 12, 0)),
        )
    return _make
