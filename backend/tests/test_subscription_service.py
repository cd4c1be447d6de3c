"""Tests for owner-scoped subscription storage."""

import pytest
from datetime import date
from decimal import Decimal

from subbase.errors import NotFoundError, ValidationApiError
from subbase.models.subscription import BillingCycle, SubscriptionStatus
from subbase.schemas.subscription import SubscriptionCreate, SubscriptionPatch
from subbase.services import subscription_service

from conftest import USER_ID, OTHER_USER_ID


class TestOwnerIsolation:
    """Queries never return another owner's rows."""

    def test_list_by_owner(self, db_session, make_subscription):
        own = make_subscription(name="Netflix")
        make_subscription(name="Foreign", user_id=OTHER_USER_ID)

        result = subscription_service.list_by_owner(db_session, USER_ID)
        assert [s.id for s in result] == [own.id]

    def test_list_by_owner_status_filter(self, db_session, make_subscription):
        make_subscription(name="Netflix")
        paused = make_subscription(name="Gym", status=SubscriptionStatus.paused)

        result = subscription_service.list_by_owner(db_session, USER_ID, status=SubscriptionStatus.paused)
        assert [s.id for s in result] == [paused.id]

    def test_list_by_ids_skips_foreign_and_missing(self, db_session, make_subscription):
        own = make_subscription(name="Netflix")
        foreign = make_subscription(name="Foreign", user_id=OTHER_USER_ID)

        result = subscription_service.list_by_ids(
            db_session, USER_ID, [own.id, foreign.id, "00000000-0000-4000-8000-000000000000"]
        )
        assert [s.id for s in result] == [own.id]

    def test_list_by_ids_empty(self, db_session):
        assert subscription_service.list_by_ids(db_session, USER_ID, []) == []

    def test_get_foreign_raises(self, db_session, make_subscription):
        foreign = make_subscription(user_id=OTHER_USER_ID)

        with pytest.raises(NotFoundError):
            subscription_service.get_by_id(db_session, USER_ID, foreign.id)

    def test_delete_foreign_raises(self, db_session, make_subscription):
        foreign = make_subscription(user_id=OTHER_USER_ID)

        with pytest.raises(NotFoundError):
            subscription_service.delete(db_session, USER_ID, foreign.id)
        assert subscription_service.get_by_id(db_session, OTHER_USER_ID, foreign.id)


class TestPagination:

    def test_newest_first(self, db_session, make_subscription):
        for i in range(3):
            make_subscription(name=f"Service {i}")

        items, pagination = subscription_service.list_page(db_session, USER_ID, page=1, limit=2)

        assert [s.name for s in items] == ["Service 2", "Service 1"]
        assert pagination.total == 3
        assert pagination.total_pages == 2

    def test_empty(self, db_session):
        items, pagination = subscription_service.list_page(db_session, USER_ID)
        assert items == []
        assert pagination.total_pages == 0


class TestMutations:

    def test_create_defaults(self, db_session):
        data = SubscriptionCreate(
            name="Spotify",
            cost=Decimal("23.99"),
            billing_cycle=BillingCycle.monthly,
            start_date=date(2024, 3, 1),
        )

        subscription = subscription_service.create(db_session, USER_ID, data)

        assert subscription.user_id == USER_ID
        assert subscription.currency == "PLN"
        assert subscription.status == SubscriptionStatus.active

    def test_patch_only_given_fields(self, db_session, make_subscription):
        subscription = make_subscription(name="Netflix", cost="43.00")

        patched = subscription_service.patch(
            db_session, USER_ID, subscription.id, SubscriptionPatch(status=SubscriptionStatus.paused)
        )

        assert patched.status == SubscriptionStatus.paused
        assert patched.name == "Netflix"
        assert patched.cost == Decimal("43.00")

    def test_patch_rejects_billing_date_before_start(self, db_session, make_subscription):
        subscription = make_subscription()

        with pytest.raises(ValidationApiError):
            subscription_service.patch(
                db_session, USER_ID, subscription.id, SubscriptionPatch(next_billing_date=date(2023, 12, 1))
            )
