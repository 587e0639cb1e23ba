# core/tests/utils.py
"""Shared fixtures for the marketplace test suites."""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from projects.models import Project

User = get_user_model()


def make_user(username, role=User.Role.INVESTOR, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="S3cure-pass-2024",
        role=role,
        **extra,
    )


def make_project(owner, target=Decimal("1000000.00"), status=Project.Status.FUNDING, **extra):
    defaults = {
        "title": "Solar irrigation pilot",
        "description": "Drip irrigation for smallholder farms.",
        "category": "agriculture",
        "country": "Senegal",
        "contract_type": Project.ContractType.MUDARABAH,
        "expected_return": Decimal("12.00"),
        "deadline": timezone.now() + timedelta(days=30),
    }
    defaults.update(extra)
    return Project.objects.create(owner=owner, target_amount=target, status=status, **defaults)


class MarketplaceFixtureMixin:
    """admin / entrepreneur / two investors / outsider and one funding project."""

    def setUp(self):
        super().setUp()
        self.admin = make_user("admin", role=User.Role.ADMIN)
        self.entrepreneur = make_user("awa", role=User.Role.ENTREPRENEUR)
        self.investor = make_user("moussa")
        self.other_investor = make_user("fatou")
        self.outsider = make_user("ibrahima")
        self.project = make_project(self.entrepreneur)
