"""
Shared pytest fixtures for all tests.
"""

from datetime import datetime, timezone

import pytest

from rentpool.modules.organizations.models import Organization
from rentpool.modules.properties.models import Property
from rentpool.modules.requests.models import RentalRequest


# ============================================================
# Sample Data Fixtures
# ============================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used across tests."""
    return datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def personal_org() -> Organization:
    """Single-landlord organization."""
    return Organization(id="org_personal", name="Anna Nowak", is_personal=True)


@pytest.fixture
def agency_org() -> Organization:
    """Multi-member agency organization."""
    return Organization(id="org_agency", name="Poznań Homes", is_personal=False)


@pytest.fixture
def make_request():
    """Factory for rental requests with sensible defaults."""

    def _make(**overrides) -> RentalRequest:
        data = {
            "id": 1,
            "title": "2-bed flat near the centre",
            "location": "Poznań, Jeżyce",
            "budget_from": 2000,
            "budget_to": 3000,
            "property_type": "apartment",
            "bedrooms": 2,
            "tenant_name": "Jan Kowalski",
        }
        data.update(overrides)
        return RentalRequest.model_validate(data)

    return _make


@pytest.fixture
def make_property(agency_org):
    """Factory for available properties owned by the agency by default."""

    def _make(**overrides) -> Property:
        data = {
            "id": "prop_1",
            "organization_id": agency_org.id,
            "organization": agency_org,
            "city": "Poznań",
            "address": "ul. Dąbrowskiego 10, Jeżyce",
            "monthly_rent": 2500,
            "property_type": "apartment",
            "bedrooms": 2,
        }
        data.update(overrides)
        return Property.model_validate(data)

    return _make
