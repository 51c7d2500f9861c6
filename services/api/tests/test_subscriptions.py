"""Tests for subscription tier transitions against a fake billing gateway."""

import pytest

from recipebox.errors import BillingFailure, PaymentMethodRequired, ValidationFailed
from recipebox.models import Tier
from recipebox.services import subscriptions


def test_upgrade_creates_customer_and_subscription(db_session, free_user, billing):
    user = subscriptions.change_tier(db_session, free_user, 1, "pm_card", billing)

    assert user.subscription_tier == Tier.TIER1
    assert user.subscription_status == "active"
    assert user.stripe_customer_id.startswith("cus_")
    assert user.stripe_subscription_id in billing.subscriptions
    assert user.subscription_expires_at is not None
    assert [call[0] for call in billing.calls] == ["create_customer", "create_subscription"]
    assert billing.calls[1][2] == "price_tier1"


def test_upgrade_existing_subscription_changes_price(db_session, free_user, billing):
    user = subscriptions.change_tier(db_session, free_user, 1, "pm_card", billing)
    first_sub = user.stripe_subscription_id
    billing.calls.clear()

    user = subscriptions.change_tier(db_session, user, 2, "pm_card2", billing)
    assert user.subscription_tier == Tier.TIER2
    assert user.stripe_subscription_id == first_sub
    assert [call[0] for call in billing.calls] == [
        "update_customer", "retrieve_subscription", "update_subscription",
    ]
    assert billing.calls[-1][3] == "price_tier2"


def test_upgrade_after_cancelled_subscription_starts_new_one(db_session, free_user, billing):
    user = subscriptions.change_tier(db_session, free_user, 2, "pm_card", billing)
    old_sub = user.stripe_subscription_id
    billing.cancel_subscription(old_sub)

    user = subscriptions.change_tier(db_session, user, 1, "pm_card", billing)
    assert user.stripe_subscription_id != old_sub
    assert billing.calls[-1][0] == "create_subscription"


def test_upgrade_requires_payment_method(db_session, free_user, billing):
    with pytest.raises(PaymentMethodRequired):
        subscriptions.change_tier(db_session, free_user, 2, None, billing)
    assert billing.calls == []


def test_failed_upgrade_leaves_user_untouched(db_session, free_user, billing):
    billing.fail_on.add("create_subscription")

    with pytest.raises(BillingFailure) as exc:
        subscriptions.change_tier(db_session, free_user, 1, "pm_card", billing)
    assert exc.value.status_code == 502
    assert exc.value.details == {"code": "card_declined"}

    db_session.refresh(free_user)
    assert free_user.subscription_tier == Tier.FREE
    assert free_user.stripe_customer_id is None
    assert free_user.stripe_subscription_id is None


def test_upgrade_without_configured_price(db_session, free_user, billing, monkeypatch):
    from recipebox.settings import settings
    monkeypatch.setattr(settings, "stripe_price_tier2", None)
    with pytest.raises(BillingFailure):
        subscriptions.change_tier(db_session, free_user, 2, "pm_card", billing)
    assert billing.calls == []


def test_downgrade_cancels_subscription(db_session, free_user, billing):
    user = subscriptions.change_tier(db_session, free_user, 2, "pm_card", billing)
    sub_id = user.stripe_subscription_id
    customer_id = user.stripe_customer_id

    user = subscriptions.change_tier(db_session, user, 0, None, billing)
    assert ("cancel_subscription", sub_id) in billing.calls
    assert user.subscription_tier == Tier.FREE
    assert user.subscription_status == "active"
    assert user.stripe_subscription_id is None
    assert user.subscription_expires_at is None
    assert user.stripe_customer_id == customer_id


def test_downgrade_survives_cancel_failure(db_session, tier2_user, billing, caplog):
    tier2_user.stripe_subscription_id = "sub_gone"
    db_session.commit()
    billing.fail_on.add("cancel_subscription")

    user = subscriptions.change_tier(db_session, tier2_user, 0, None, billing)

    assert user.subscription_tier == 0
    assert user.stripe_subscription_id is None
    assert "Failed to cancel billing subscription sub_gone" in caplog.text


def test_downgrade_without_subscription_skips_billing(db_session, tier1_user, billing):
    subscriptions.change_tier(db_session, tier1_user, 0, None, billing)
    assert billing.calls == []


@pytest.mark.parametrize("tier", [3, 100, -1])
def test_invalid_target_tier(db_session, free_user, billing, tier):
    with pytest.raises(ValidationFailed):
        subscriptions.change_tier(db_session, free_user, tier, "pm_card", billing)


def test_subscription_summary(tier1_user):
    summary = subscriptions.subscription_summary(tier1_user)
    assert summary["user"]["subscription_tier"] == 1
    assert summary["subscription"]["name"] == "Enthusiast"
    assert summary["subscription"]["price"] == 9.99
