"""
Test Case Suite: Result Projector
Test ID Range: TC-023 to TC-028

Projectors are fed plain objects standing in for loaded rows, which also
proves they never reach back to the database.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

from homesphere.models.enums import PropertyStatus, ReviewStatus, SubscriptionPlan, VerificationStatus
from homesphere.query.projection import (
    DEFAULT_AGENT_LOCATION,
    DEFAULT_AGENT_RATING,
    DEFAULT_SPECIALTIES,
    average_rating,
    project_agent_card,
    property_totals,
    to_number,
)

NOW = datetime(2026, 1, 15, tzinfo=timezone.utc)


def _review(rating, status=ReviewStatus.APPROVED):
    return SimpleNamespace(rating=rating, status=status)


def _property(price, status=PropertyStatus.ACTIVE, city="Lagos", state="Lagos", age_days=0):
    return SimpleNamespace(
        price=Decimal(price),
        status=status,
        city=city,
        state=state,
        created_at=NOW - timedelta(days=age_days),
    )


def _agent(properties=(), reviews=(), **overrides):
    user = SimpleNamespace(full_name="Ada Agent", email="ada@example.com", avatar=None)
    fields = dict(
        id="agent-1",
        user=user,
        properties=list(properties),
        reviews=list(reviews),
        bio=None,
        specialties=[],
        registration_number="REG-1",
        is_verified=True,
        verification_status=VerificationStatus.APPROVED,
        subscription_plan=SubscriptionPlan.BASIC,
        phone=None,
        profile_image=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestAgentCard:
    """
    Test Case TC-023: Agent Card Defaults
    Expected Result: Missing optional data is filled with documented defaults
    """
    def test_tc023_empty_agent_gets_defaults(self):
        """TC-023: No reviews, listings or specialties"""
        card = project_agent_card(_agent())
        assert card["rating"] == DEFAULT_AGENT_RATING
        assert card["location"] == DEFAULT_AGENT_LOCATION
        assert card["specialties"] == DEFAULT_SPECIALTIES
        assert card["reviews"] == 0
        assert card["properties_sold"] == 0

    def test_tc024_aggregates_come_from_loaded_collections(self):
        """TC-024: Counts and rating are computed from the agent's rows"""
        agent = _agent(
            properties=[
                _property("100", city="Ikeja", state="Lagos", age_days=3),
                _property("200", city="Abuja", state="FCT", age_days=1),
                _property("300", status=PropertyStatus.SOLD),
                _property("400", status=PropertyStatus.PENDING),
            ],
            reviews=[_review(5), _review(4), _review(1, ReviewStatus.PENDING)],
        )
        card = project_agent_card(agent)
        assert card["active_listings"] == 2
        assert card["properties_sold"] == 1
        assert card["reviews"] == 2
        assert card["rating"] == 4.5
        # Most recent active listing
        assert card["location"] == "Abuja, FCT"


class TestAggregates:
    """
    Test Case TC-025: Derived Numbers
    Expected Result: Pending reviews never count; totals are exact decimals
    """
    def test_tc025_average_rating_ignores_unapproved(self):
        """TC-025: Only APPROVED reviews are averaged"""
        reviews = [_review(3), _review(1, ReviewStatus.REJECTED)]
        assert average_rating(reviews) == 3.0
        assert average_rating([], default=None) is None

    def test_tc026_property_totals(self):
        """TC-026: Sum and mean price"""
        totals = property_totals([_property("100"), _property("200.50")])
        assert totals == {"total_properties": 2, "total_value": 300.5, "average_price": 150.25}

    def test_tc027_property_totals_empty(self):
        """TC-027: No properties means zeros, not a division error"""
        assert property_totals([]) == {"total_properties": 0, "total_value": 0, "average_price": 0}

    def test_tc028_decimal_conversion(self):
        """TC-028: Whole decimals become ints"""
        assert to_number(Decimal("150.00")) == 150
        assert isinstance(to_number(Decimal("150.00")), int)
        assert to_number(Decimal("99.95")) == 99.95
